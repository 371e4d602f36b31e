import random

import pytest

from maze_levelgenerator.generators.maze import (
    Maze, MazeGenerator, MazeNodeKind, MazeSettings, generate_cell,
)
from maze_levelgenerator.geometry import Transform, vec3
from maze_levelgenerator.validation import (
    ALL_RULES, Severity, ValidationError, ValidationResult, check_connectors, get_rule,
    validate_maze,
)

T = MazeNodeKind.TRANSPARENT


def _room(maze, position=(0, 0, 0), kind=MazeNodeKind.ROOM, seed=0):
    cell = generate_cell(maze, kind, Transform(vec3(*position), scale=vec3(16, 16, 16)),
                         random.Random(seed))
    maze.children.append(cell)
    return cell


def _link(a, b, connector_a, connector_b):
    connector_a.state.link = b
    connector_a.state.is_available = False
    connector_b.state.link = a
    connector_b.state.is_available = False


def test_generated_mazes_pass():
    for seed in [1, 5, 8, 13]:
        maze = MazeGenerator(MazeSettings(max_accepted_cells=8), seed=seed).generate()
        result = validate_maze(maze, fail_fast=True)
        assert result.passed
        assert result.issues == []


def test_broken_maze_reports_every_problem():
    maze = Maze()
    _room(maze)
    _room(maze, position=(4, 0, 0))

    result = validate_maze(maze)
    codes = result.codes()
    assert result.failed
    assert "MAZE-001" in codes
    assert "MAZE-004" in codes
    assert codes.count("MAZE-002") == 8


def test_fail_fast_raises_with_result():
    maze = Maze()
    _room(maze, kind=MazeNodeKind.ROOT)

    with pytest.raises(ValidationError) as excinfo:
        validate_maze(maze, fail_fast=True)
    assert excinfo.value.result.failed
    assert "MAZE-002" in str(excinfo.value)


def test_open_connector_message_names_the_cell():
    maze = Maze()
    _room(maze, kind=MazeNodeKind.ROOT)

    result = validate_maze(maze)
    assert result.codes() == ["MAZE-002"] * 4
    issue = result.issues[0]
    assert issue.cell in issue.message
    assert issue.connector.startswith(issue.cell)
    assert issue.remediation


def test_one_way_link_message_names_the_cell():
    maze = Maze()
    a = _room(maze, kind=MazeNodeKind.ROOT)
    b = _room(maze, position=(40, 0, 0))
    a.filter([T])[1].state.link = b

    issues = [i for i in check_connectors(maze).issues if i.code == "MAZE-003"]
    assert len(issues) == 1
    assert issues[0].cell in issues[0].message
    assert issues[0].connector == issues[0].cell + "/1"


def test_one_way_link():
    maze = Maze()
    a = _room(maze, kind=MazeNodeKind.ROOT)
    b = _room(maze, position=(40, 0, 0))
    a.filter([T])[1].state.link = b

    assert "MAZE-003" in check_connectors(maze).codes()


def test_linked_connectors_must_face_each_other():
    maze = Maze()
    a = _room(maze, kind=MazeNodeKind.ROOT)
    b = _room(maze, position=(40, 0, 0))
    # Both east-facing: wrong orientation
    _link(a, b, a.filter([T])[1], b.filter([T])[1])

    result = check_connectors(maze)
    warnings = [i for i in result.issues if i.code == "MAZE-005"]
    assert len(warnings) == 2
    assert all(i.severity == Severity.WARN for i in warnings)

    # Facing pair is fine
    maze2 = Maze()
    c = _room(maze2, kind=MazeNodeKind.ROOT)
    d = _room(maze2, position=(40, 0, 0))
    _link(c, d, c.filter([T])[1], d.filter([T])[3])
    assert "MAZE-005" not in check_connectors(maze2).codes()


def test_linked_overlap_is_allowed():
    maze = Maze()
    a = _room(maze, kind=MazeNodeKind.ROOT)
    b = _room(maze, position=(16, 0, 0))
    _link(a, b, a.filter([T])[1], b.filter([T])[3])
    assert "MAZE-001" not in validate_maze(maze).codes()


def test_report_and_dict():
    maze = Maze()
    _room(maze)
    result = validate_maze(maze)
    report = result.report()
    assert report.startswith("Validation FAILED")
    assert "MAZE-004" in report

    data = result.to_dict()
    assert data["passed"] is False
    assert data["fail_count"] == len(result.errors)
    assert data["warn_count"] == 0
    assert data["counts"]["MAZE-004"] == 1
    assert data["counts"]["MAZE-002"] == 4
    assert result.by_severity(Severity.WARN) == []

    assert ValidationResult().report() == "Validation passed: No issues found"


def test_rule_registry():
    assert set(ALL_RULES) == {"MAZE-001", "MAZE-002", "MAZE-003", "MAZE-004", "MAZE-005"}
    rule = get_rule("MAZE-004")
    issue = rule.issue(count=3)
    assert issue.severity == Severity.FAIL
    assert issue.message == "Maze has 3 ROOT cells (expected 1)"
    assert get_rule("MAZE-999") is None
