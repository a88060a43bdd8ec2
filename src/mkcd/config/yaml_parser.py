"""YAML parser with line tracking for configuration error reporting.

Provides a PyYAML SafeLoader subclass that records the source line of
every key, so validation problems can point at the exact place in the
user's mkcd.yaml.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from mkcd.errors import ParseError

LineMap = dict[str, tuple[int, int]]


class LineTrackingLoader(yaml.SafeLoader):
    """SafeLoader that builds a dotted-path -> (line, column) map.

    Positions are 1-indexed. Sequence items contribute their index to
    the path, e.g. ``safety.forbidden_paths.2``.
    """

    def __init__(self, stream: str) -> None:
        super().__init__(stream)
        self.line_map: LineMap = {}
        self._prefix_stack: list[str] = []

    def _record(self, key: str, node: yaml.Node) -> None:
        if node.start_mark is None:
            return
        full_key = ".".join([*self._prefix_stack, key])
        self.line_map[full_key] = (node.start_mark.line + 1, node.start_mark.column + 1)

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[str, Any]:
        """Override to capture line numbers for every key in the mapping."""
        self.flatten_mapping(node)
        pairs = []
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            if isinstance(key, str):
                self._record(key, key_node)

            if isinstance(key, str) and isinstance(
                value_node, (yaml.MappingNode, yaml.SequenceNode)
            ):
                self._prefix_stack.append(key)
                value = self.construct_object(value_node, deep=deep)
                self._prefix_stack.pop()
            else:
                value = self.construct_object(value_node, deep=deep)

            pairs.append((key, value))

        return dict(pairs)

    def construct_sequence(self, node: yaml.SequenceNode, deep: bool = False) -> list[Any]:
        """Override to track list item indices in the key path."""
        result = []
        for idx, child_node in enumerate(node.value):
            self._record(str(idx), child_node)
            self._prefix_stack.append(str(idx))
            result.append(self.construct_object(child_node, deep=deep))
            self._prefix_stack.pop()
        return result

    def construct_yaml_map(self, node: yaml.MappingNode) -> Any:
        data = self.construct_mapping(node, deep=True)
        yield data

    def construct_yaml_seq(self, node: yaml.SequenceNode) -> Any:
        data = self.construct_sequence(node, deep=True)
        yield data


LineTrackingLoader.add_constructor(
    "tag:yaml.org,2002:map",
    LineTrackingLoader.construct_yaml_map,
)

LineTrackingLoader.add_constructor(
    "tag:yaml.org,2002:seq",
    LineTrackingLoader.construct_yaml_seq,
)


def parse_yaml_with_lines(source: str, filename: str = "<string>") -> tuple[dict | None, LineMap]:
    """Parse a YAML string and return (data, line_map).

    Returns (None, {}) for empty or comment-only input.

    Raises:
        ParseError: If the YAML contains syntax errors or its top level
            is not a mapping.
    """
    try:
        loader = LineTrackingLoader(source)
        try:
            data = loader.get_single_data()
        finally:
            loader.dispose()
    except yaml.YAMLError as e:
        line = None
        column = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
            column = mark.column + 1
        raise ParseError(str(e), filename=filename, line=line, column=column) from e

    if data is None:
        return None, {}
    if not isinstance(data, dict):
        raise ParseError(
            f"top level must be a mapping of sections, got {type(data).__name__}",
            filename=filename,
            line=1,
            column=1,
        )

    return data, loader.line_map


def parse_yaml_file(filepath: Path) -> tuple[dict | None, LineMap]:
    """Parse a YAML file and return (data, line_map).

    Raises:
        ParseError: If the file cannot be read or parsed.
    """
    try:
        source = filepath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read file: {e}", filename=str(filepath)) from e
    return parse_yaml_with_lines(source, filename=str(filepath))
