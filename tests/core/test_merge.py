import pytest

pytest.importorskip("lxml")

from brd_fixer.core.exceptions import MalformedDocument
from brd_fixer.core.grouping import group_libraries
from brd_fixer.core.merge import apply_merge, plan_merge, plan_merges, select_duplicate_groups
from brd_fixer.core.models import BrdFormat
from brd_fixer.core.report import RepairReport
from brd_fixer.core.xml_utils import find_all, parse_board, serialize_board

FMT = BrdFormat()


def _plans(board: str):
    tree = parse_board(board)
    report = RepairReport()
    groups = group_libraries(tree, FMT, report)
    plans = plan_merges(select_duplicate_groups(groups, report), FMT, report)
    return tree, plans, report


def _package_names(lib):
    return [pkg.get("name") for pkg in find_all(lib, ".//packages/package")]


class TestPlanMerge:
    """Test cases for the package union computed before mutation."""

    def test_only_duplicated_names_are_planned(self, pinhead_board):
        _, plans, report = _plans(pinhead_board)

        assert [plan.name for plan in plans] == ["pinhead-2"]
        assert 'Step 3: Library "pinhead-2" has 2 variants - NEEDS CONSOLIDATION' in report.lines

    def test_union_of_package_names(self, board_builder):
        board = board_builder.board(
            board_builder.library("L", [("A", "a1"), ("B", "b1")]),
            board_builder.library("L", [("C", "c1")], urn="urn:1"),
            board_builder.library("L", [("D", "d1"), ("A", "a3")], urn="urn:2"),
        )
        _, plans, report = _plans(board)
        plan = plans[0]

        assert list(plan.packages) == ["A", "B", "C", "D"]
        assert plan.variant_counts == [2, 1, 2]
        assert plan.unique_packages == 4
        assert report.total_packages == 4
        assert len(plan.discarded) == 2

    def test_last_write_wins_keeps_first_position(self, board_builder):
        board = board_builder.board(
            board_builder.library("L", [("P", "A"), ("Q", "q")]),
            board_builder.library("L", [("P", "B")], urn="X"),
        )
        _, plans, report = _plans(board)
        plan = plans[0]

        assert list(plan.packages) == ["P", "Q"]
        assert plan.packages["P"].findtext("description") == "B"
        assert "    - P (overrides earlier definition)" in report.lines

    def test_duplicate_inside_one_library_also_overrides(self, board_builder):
        board = board_builder.board(
            board_builder.library("L", [("P", "first"), ("P", "second")]),
            board_builder.library("L", [], urn="X"),
        )
        _, plans, _ = _plans(board)
        assert plans[0].packages["P"].findtext("description") == "second"

    def test_planning_does_not_mutate(self, pinhead_board):
        tree = parse_board(pinhead_board)
        before = serialize_board(tree)
        report = RepairReport()
        groups = group_libraries(tree, FMT, report)
        plan_merge(groups["pinhead-2"], FMT, report)
        assert serialize_board(tree) == before

    def test_package_without_name_is_malformed(self):
        board = (
            "<eagle><library name='L'><packages><package/></packages></library>"
            "<library name='L' urn='x'/></eagle>"
        )
        with pytest.raises(MalformedDocument):
            _plans(board)


class TestApplyMerge:
    """Test cases for in-place mutation of a planned group."""

    def test_example_board(self, pinhead_board):
        tree, plans, report = _plans(pinhead_board)
        apply_merge(plans[0], FMT, report)

        libraries = find_all(tree, "library")
        assert [lib.get("name") for lib in libraries] == ["pinhead-2", "rcl"]
        merged = libraries[0]
        assert "urn" not in merged.attrib
        assert _package_names(merged) == ["1X02", "1X05"]
        assert libraries[1].get("urn") == "urn:adsk.eagle:library:334"
        assert "  Removed duplicate library variant 2" in report.lines
        assert report.libraries_merged == 1

    def test_urn_removed_from_retained_library_with_urn(self, board_builder):
        board = board_builder.board(
            board_builder.library("L", [("A", "a")], urn="urn:first"),
            board_builder.library("L", [("B", "b")], urn="urn:second"),
        )
        tree, plans, report = _plans(board)
        apply_merge(plans[0], FMT, report)

        (lib,) = find_all(tree, "library")
        assert lib.get("urn") is None
        assert "urn" not in lib.attrib

    def test_wrapper_created_when_missing(self):
        board = (
            "<eagle><libraries>"
            "<library name='L'><description>keep me</description></library>"
            "<library name='L' urn='x'><packages><package name='A'/></packages></library>"
            "</libraries></eagle>"
        )
        tree, plans, report = _plans(board)
        apply_merge(plans[0], FMT, report)

        (lib,) = find_all(tree, "library")
        assert lib.findtext("description") == "keep me"
        assert lib[-1].tag == "packages"
        assert _package_names(lib) == ["A"]

    def test_no_residual_original_packages(self, board_builder):
        board = board_builder.board(
            board_builder.library("L", [("P", "old"), ("Q", "q")]),
            board_builder.library("L", [("P", "new")], urn="X"),
        )
        tree, plans, report = _plans(board)
        apply_merge(plans[0], FMT, report)

        (lib,) = find_all(tree, "library")
        packages = find_all(lib, ".//packages/package")
        assert [p.get("name") for p in packages] == ["P", "Q"]
        assert packages[0].findtext("description") == "new"

    def test_unrelated_siblings_keep_their_position(self):
        board = (
            "<eagle><libraries>"
            "<library name='L'><packages><package name='A'/></packages></library>"
            "<!-- between -->"
            "<library name='M'/>"
            "<library name='L' urn='x'><packages><package name='B'/></packages></library>"
            "<library name='N'/>"
            "</libraries></eagle>"
        )
        tree, plans, report = _plans(board)
        apply_merge(plans[0], FMT, report)

        container = tree.getroot().find("libraries")
        kinds = [
            child.get("name") if child.tag == "library" else "comment"
            for child in container
        ]
        assert kinds == ["L", "comment", "M", "N"]

    def test_whitespace_after_removed_library_is_kept(self):
        board = (
            "<libraries>\n"
            "  <library name='L'/>\n"
            "  <library name='L' urn='x'/>\n"
            "  <library name='Z'/>\n"
            "</libraries>"
        )
        tree, plans, report = _plans(board)
        apply_merge(plans[0], FMT, report)

        text = serialize_board(tree)
        assert "<library name=\"Z\"/>\n</libraries>" in text
        assert "urn" not in text

    def test_packages_from_every_wrapper_end_up_in_the_first(self):
        board = (
            "<eagle><libraries>"
            "<library name='L'><packages><package name='A'/></packages>"
            "<packages><package name='C'/></packages></library>"
            "<library name='L' urn='x'><packages><package name='B'/></packages></library>"
            "</libraries></eagle>"
        )
        tree, plans, report = _plans(board)
        apply_merge(plans[0], FMT, report)

        (lib,) = find_all(tree, "library")
        assert _package_names(lib) == ["A", "C", "B"]
        wrappers = lib.findall("packages")
        assert [len(w) for w in wrappers] == [3, 0]
        assert "  Moved C into the first packages wrapper" in report.lines
