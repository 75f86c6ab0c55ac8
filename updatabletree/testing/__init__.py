"""Testing utilities for updatable-tree consumers."""

from .fixtures import ScriptedSource, ScriptedNode, NotificationRecorder

__all__ = ['ScriptedSource', 'ScriptedNode', 'NotificationRecorder']
