import json
import logging
from typing import Optional

from treeftp.core.errors import ExportWriteError
from treeftp.tree_node import TreeNode

logger = logging.getLogger(__name__)


def tree_to_json(root: Optional[TreeNode]) -> str:
    """Serializa el árbol con indentación de 2 espacios (`null` si no hay árbol)."""
    return json.dumps(root.to_dict() if root is not None else None, indent=2, ensure_ascii=False)


def write_tree_json(root: Optional[TreeNode], filename: str):
    """
    Writes the JSON representation of `root` to `filename`.

    Raises:
        ExportWriteError: if the destination cannot be written.
    """
    payload = tree_to_json(root)
    try:
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(payload)
    except (OSError, ValueError) as e:
        raise ExportWriteError(f"Could not write {filename!r}: {e}") from e


def export_tree(root: Optional[TreeNode], filename: str) -> bool:
    """Export boundary: failures are logged, never raised. Returns True on success."""
    logger.info("Writing the JSON representation to %s...", filename)
    try:
        write_tree_json(root, filename)
    except ExportWriteError as e:
        logger.error("An error occurred while writing to the JSON file: %s", e)
        return False
    logger.info("JSON file written successfully to %s", filename)
    return True
