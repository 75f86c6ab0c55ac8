#!/usr/bin/env python3
"""
Basic example: a pull request panel backed by a simulated remote.

This example demonstrates:
- Building a tree from settings with eager search roots
- Refreshing in place while node identity is preserved
- A slow backend hitting the timeout without losing cached rows
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from updatabletree.aio import (
    CachingFetcher,
    ContinueOnErrorsPolicy,
    LeafNode,
    QueryNode,
    SourceSettings,
    StaticNode,
    UpdatableTreeRoot,
)


# Simulated remote state; edit it between refreshes to see the diff at work
REMOTE = {
    "author:duke": [
        {"id": 101, "title": "8270000: Fix crash in C2", "url": "pulls/101", "author": "duke"},
    ],
    "label:hotspot": [
        {"id": 101, "title": "8270000: Fix crash in C2", "url": "pulls/101", "author": "duke"},
        {"id": 102, "title": "8270001: Add missing test", "url": "pulls/102", "author": "jane"},
    ],
}
PULL_DETAILS = {
    "pulls/101": {"additions": 12, "deletions": 3, "changed_files": 2},
    "pulls/102": {"additions": 40, "deletions": 0, "changed_files": 1},
}
LATENCY = {"value": 0.05}


async def get_json(url, context):
    await asyncio.sleep(LATENCY["value"])
    return PULL_DETAILS[url]


pull_details = CachingFetcher(get_json, ttl=30.0)


def search(query):
    async def run(context):
        await asyncio.sleep(LATENCY["value"])
        return REMOTE.get(query, [])
    return run


def pull_request_node(item, parent):
    node_id = f"{parent.id}-{item['id']}"
    diff = LeafNode("Diff", "diff" + node_id, target_url=f"https://example.org/{item['url']}/files")
    rows = [LeafNode(f"#{item['id']} by @{item['author']}", "goto" + node_id), diff]

    async def fill_in_diff(node, context):
        stats = await pull_details(item["url"], context)
        diff.label = f"+{stats['additions']} -{stats['deletions']}, {stats['changed_files']} changed files"

    return StaticNode(item["title"], node_id, rows, on_load=fill_in_diff, tree=parent.tree)


class PullRequestPanel(UpdatableTreeRoot):

    def __init__(self, settings):
        self.settings = settings
        super().__init__(ContinueOnErrorsPolicy(verbose=False, show_message=lambda text: print(f"[popup] {text}")))

    def verify_settings(self):
        return self.settings.is_valid()

    def resolve_context(self):
        return self.settings.to_context()

    def setup_tree(self):
        roots = [QueryNode("My PRs", "id-my-prs", search(f"author:{self.settings.username}"),
                           pull_request_node, noun="open pull requests", tree=self, timeout_ms=500)]
        if self.settings.label_filter:
            roots.append(QueryNode(f"PRs for {self.settings.label_filter}", "id-open-prs-labels",
                                   search(f"label:{self.settings.label_filter}"),
                                   pull_request_node, noun="open pull requests", tree=self, timeout_ms=500))
        return roots


async def show(panel):
    for root in panel.get_roots():
        print(f"{root.label} ({root.description})")
        for pr in await panel.get_children(root):
            print(f"  {pr.label}")
            for row in await panel.get_children(pr):
                print(f"    {row.label}")
    print("-" * 50)


async def main():
    settings = SourceSettings(username="duke")
    panel = PullRequestPanel(settings)
    print(f"Roots before configuration: {panel.get_roots()}")

    settings.api_token = "not-a-real-token"
    settings.label_filter = "hotspot"
    panel.refresh()
    await panel.wait_until_idle()
    await show(panel)

    kept = panel.get_roots()[1].children[0]
    REMOTE["label:hotspot"].pop(1)
    panel.refresh()
    await panel.wait_until_idle()
    await show(panel)
    print(f"First PR row kept its identity: {panel.get_roots()[1].children[0] is kept}")

    LATENCY["value"] = 1.0
    panel.refresh()
    await panel.wait_until_idle()
    await show(panel)
    print(f"Fetch cache: {pull_details.get_cache_stats()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("updatable-tree - Pull Request Panel Example")
    print("=" * 50)
    asyncio.run(main())
