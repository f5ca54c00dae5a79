"""
Child records: grouping helpers and the two cleanup jobs.

The pure helpers take lists of row dicts so they can be reused on whatever
columns a caller selected.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .db import repository as repo

logger = logging.getLogger(__name__)


def group_by_initial(children: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    groups: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for child in children:
        name = (child.get("name") or "").strip()
        if name:
            groups[name[0].upper()].append(child)
    return dict(sorted(groups.items()))


def children_starting_with(children: Iterable[Dict[str, Any]], letter: str) -> List[Dict[str, Any]]:
    letter = letter.lower()
    return [c for c in children if (c.get("name") or "").lower().startswith(letter)]


def find_duplicate_children(children: Iterable[Dict[str, Any]]) -> List[str]:
    """
    Return the ids of duplicate children to delete.

    Children with the same `(name, parent_id)` are duplicates; the oldest
    (by `created_at`, ties keep input order) survives.
    """
    ordered = sorted(children, key=lambda c: c.get("created_at") or "")
    groups: Dict[Tuple[Any, Any], List[Dict[str, Any]]] = defaultdict(list)
    for child in ordered:
        groups[(child.get("name"), child.get("parent_id"))].append(child)

    to_delete: List[str] = []
    for group in groups.values():
        to_delete.extend(child["id"] for child in group[1:])
    return to_delete


def find_orphaned_children(
    children: Iterable[Dict[str, Any]],
    valid_parent_ids: Iterable[str],
) -> List[Dict[str, Any]]:
    valid = set(valid_parent_ids)
    return [c for c in children if c.get("parent_id") not in valid]


@dataclass
class NameMatch:
    child_name: str
    videos: List[Dict[str, Any]] = field(default_factory=list)
    child: Optional[Dict[str, Any]] = None

    @property
    def matched(self) -> bool:
        return self.child is not None


def match_videos_to_children(
    children: List[Dict[str, Any]],
    videos: Iterable[Dict[str, Any]],
) -> List[NameMatch]:
    """Group approved videos by `child_name` and find the child each name belongs to."""
    by_name: Dict[str, NameMatch] = {}
    for video in videos:
        name = video.get("child_name") or ""
        by_name.setdefault(name, NameMatch(child_name=name)).videos.append(video)

    index = {}
    for child in children:
        index.setdefault((child.get("name") or "").lower(), child)

    for match in by_name.values():
        match.child = index.get(match.child_name.lower())
    return list(by_name.values())


# ============================================================
# Cleanup jobs
# ============================================================

def cleanup_duplicate_children(client, dry_run: bool = False) -> List[str]:
    children = repo.list_children(client, order_by="created_at")
    to_delete = find_duplicate_children(children)
    logger.info("Found %d duplicate children out of %d", len(to_delete), len(children))

    if to_delete and not dry_run:
        repo.delete_children(client, to_delete)
    return to_delete


def cleanup_orphaned_children(client, dry_run: bool = False) -> List[str]:
    children = repo.list_children(client, columns="id, name, parent_id, created_at")
    orphans = find_orphaned_children(children, repo.list_user_ids(client))
    ids = [c["id"] for c in orphans]
    logger.info("Found %d orphaned children", len(ids))

    if ids and not dry_run:
        repo.delete_children(client, ids)
    return ids
