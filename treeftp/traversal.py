import logging
from collections import deque
from typing import Callable, List, Optional

from treeftp.core.parser import Parser
from treeftp.tree_node import TreeNode

logger = logging.getLogger(__name__)

ROOT_PATH = "/"
# Recursion past this depth with no max depth is reported as a possible symlink loop.
DEPTH_WARNING = 64

LAST_BRANCH = "`-- "
BRANCH = "|-- "
LAST_INDENT = "    "
INDENT = "|   "
BFS_INDENT = "   "
BFS_BRANCH = "|__ "


def join_path(parent: str, name: str) -> str:
    """Child path of `parent`; the root does not get a doubled separator."""
    if parent == ROOT_PATH:
        return parent + name
    return parent + "/" + name


class TreeWalker:
    """
    Walks a remote hierarchy through repeated `client.list_directory(path)`
    calls.

    `client` is anything exposing `list_directory(path) -> str`, normally a
    `ClientCommandHandler`. Depth 0 is the listing of the starting path; a
    path at depth d is only fetched while d <= max_depth (None: unbounded).
    Printed lines go through `echo`.

    Errors raised while fetching a listing are not caught: the walk stops
    and whatever was already echoed stays.
    """

    def __init__(self, client, max_depth: Optional[int] = None, parser: Optional[Parser] = None,
                 echo: Callable[[str], None] = print):
        self.client = client
        self.max_depth = max_depth
        self.parser = parser or Parser()
        self.echo = echo
        self._depth_warned = False

    def _beyond_bound(self, depth: int) -> bool:
        if self.max_depth is None:
            if depth > DEPTH_WARNING and not self._depth_warned:
                self._depth_warned = True
                logger.warning("Traversal reached depth %d with no max depth; "
                               "the server may expose a symlink loop", depth)
            return False
        return depth > self.max_depth

    def _fetch(self, path: str) -> List[str]:
        logger.debug("Listing %s", path)
        return self.client.list_directory(path).splitlines()

    # ----------------- depth-first -----------------
    def show_dfs(self, path: str = ROOT_PATH, prefix: str = "", depth: int = 0):
        if self._beyond_bound(depth):
            return

        contents = self._fetch(path)
        for i, item in enumerate(contents):
            entry = self.parser.parse_entry(item)
            if not entry.name:
                continue
            # computed on the raw line index, trailing blank lines included
            is_last = i == len(contents) - 1
            self.echo(prefix + (LAST_BRANCH if is_last else BRANCH) + entry.name)
            if entry.is_directory:
                child_prefix = prefix + (LAST_INDENT if is_last else INDENT)
                self.show_dfs(join_path(path, entry.name), child_prefix, depth + 1)

    # ----------------- breadth-first -----------------
    def show_bfs(self, root_path: str = ROOT_PATH):
        paths_queue = deque([root_path])
        depth_queue = deque([0])

        while paths_queue:
            current_path = paths_queue.popleft()
            curr_depth = depth_queue.popleft()
            if self._beyond_bound(curr_depth):
                continue

            for item in self._fetch(current_path):
                entry = self.parser.parse_entry(item)
                if not entry.name:
                    continue
                self.echo(BFS_INDENT * curr_depth + BFS_BRANCH + entry.name)
                if entry.is_directory:
                    paths_queue.append(join_path(current_path, entry.name))
                    depth_queue.append(curr_depth + 1)

    # ----------------- tree building -----------------
    def build_tree(self, path: str = ROOT_PATH, depth: int = 0) -> Optional[TreeNode]:
        """
        Builds the TreeNode for `path`, or None when `path` lies beyond the bound.

        The node is named after the path itself (`parse_name(path)`), not after
        the entry in its parent's listing. A directory whose contents are beyond
        the bound is kept as a childless node.
        """
        if self._beyond_bound(depth):
            return None

        node = TreeNode(self.parser.parse_name(path))
        for item in self._fetch(path):
            entry = self.parser.parse_entry(item)
            if not entry.name:
                continue
            if entry.is_directory:
                child_path = join_path(path, entry.name)
                child = self.build_tree(child_path, depth + 1)
                node.add_child(child if child is not None else TreeNode(self.parser.parse_name(child_path)))
            else:
                node.add_child(TreeNode(entry.name))
        return node

    def render(self, mode: str = "dfs", path: str = ROOT_PATH) -> List[str]:
        """Runs the walk for `mode` ("dfs" or "bfs") and returns the lines instead of echoing them."""
        lines = []
        echo, self.echo = self.echo, lines.append
        try:
            if mode == "bfs":
                self.show_bfs(path)
            else:
                self.show_dfs(path)
        finally:
            self.echo = echo
        return lines
