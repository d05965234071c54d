"""Unit tests for the natural-language command interpreter."""

from datetime import date, timedelta

import pytest

from src.core.command_parser import (
    CueMatch,
    classify_command,
    cutoff_index,
    extract_delete_query,
    extract_location,
    find_cues,
    normalize_name,
    parse_add_command,
    parse_command,
    resolve_delete_target,
)
from src.domain.pantry import AddCommand, CommandAction, DeleteTarget, ParseErrorKind, ParseFailure


@pytest.mark.unit
class TestClassifyCommand:
    """Tests for classify_command function."""

    @pytest.mark.parametrize("text", ["delete the milk", "Remove yogurt", "please DELETE eggs", "remove"])
    def test_delete_keywords(self, text):
        assert classify_command(text) is CommandAction.DELETE

    @pytest.mark.parametrize("text", ["3 avocados", "removed seeds from peppers", "undeleted cheese"])
    def test_everything_else_is_add(self, text):
        """Test keywords only count as whole words."""
        assert classify_command(text) is CommandAction.ADD


@pytest.mark.unit
class TestCutoff:
    """Tests for cue detection and cutoff computation."""

    def test_find_cues_reports_each_present_cue(self):
        cues = find_cues("2 yogurts that expire in 3 days")
        kinds = [cue.kind for cue in cues]

        assert kinds == ["relative_date", "expiry_connector", "expiry_keyword", "quantity"]

    def test_cutoff_is_earliest_start(self):
        cues = [CueMatch("expiry_keyword", 10, 13), CueMatch("absolute_date", 14, 24)]
        assert cutoff_index(cues) == 10

    def test_cutoff_without_cues(self):
        assert cutoff_index([]) is None

    def test_leading_quantity_is_the_cutoff_when_present(self):
        assert cutoff_index(find_cues("3 avocados expire tomorrow")) == 0


@pytest.mark.unit
class TestNormalizeName:
    """Tests for normalize_name function."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("3 avocados", "avocados"),
            ("2 yogurts exp 2026-03-01", "yogurts"),
            ("bag of salad expires tomorrow", "bag of salad"),
            ("cheese that expires in 2 weeks", "cheese"),
            ("milk in the fridge in 3 days", "milk in the fridge"),
            ("tomorrow   fresh bread", "fresh bread"),
            ("salmon use-by 2026-04-02", "salmon"),
            ("Greek Yogurt best by today", "Greek Yogurt"),
            ("expensive cheese", "expensive cheese"),
            ("exp. milk 2026-05-01", "milk"),
            ("cheese exp. 2026-05-01", "cheese"),
            ("milk in 100000000 days", "milk"),
        ],
    )
    def test_strips_cue_language(self, text, expected):
        assert normalize_name(text) == expected

    def test_only_cues_leaves_empty_name(self):
        assert normalize_name("expires tomorrow") == ""


@pytest.mark.unit
class TestExtractLocation:
    """Tests for extract_location function."""

    @pytest.mark.parametrize(
        ("name", "expected_name", "expected_location"),
        [
            ("milk in the fridge", "milk", "fridge"),
            ("peas in freezer", "peas", "freezer"),
            ("rice on pantry shelf", "rice", "pantry shelf"),
            ("wine at the back-cellar", "wine", "back-cellar"),
            ("bacon", "bacon", None),
            ("fridge", "fridge", None),
        ],
    )
    def test_trailing_location_phrase(self, name, expected_name, expected_location):
        assert extract_location(name) == (expected_name, expected_location)


@pytest.mark.unit
class TestParseAddCommand:
    """Tests for parse_add_command function."""

    def test_quantity_and_default_expiry(self, today):
        result = parse_add_command("3 avocados", today=today)

        assert result == AddCommand(name="avocados", quantity=3, expiration_date=today + timedelta(days=7))

    def test_absolute_date(self, today):
        result = parse_add_command("2 yogurts exp 2026-03-01", today=today)

        assert isinstance(result, AddCommand)
        assert result.quantity == 2
        assert result.name == "yogurts"
        assert result.expiration_date == date(2026, 3, 1)
        assert result.model_dump()["expiration_date"] == "2026-03-01"

    def test_tomorrow(self, today):
        result = parse_add_command("bag of salad expires tomorrow", today=today)

        assert isinstance(result, AddCommand)
        assert result.quantity == 1
        assert result.name == "bag of salad"
        assert result.expiration_date == today + timedelta(days=1)

    def test_location_and_relative_date(self, today):
        result = parse_add_command("milk in the fridge in 3 days", today=today)

        assert isinstance(result, AddCommand)
        assert result.name == "milk"
        assert result.location == "fridge"
        assert result.expiration_date == today + timedelta(days=3)

    def test_ambiguous_expiry_fails(self, today):
        result = parse_add_command("chicken expires", today=today)

        assert isinstance(result, ParseFailure)
        assert result.kind is ParseErrorKind.AMBIGUOUS_EXPIRY

    def test_empty_name_uses_placeholder(self, today):
        result = parse_add_command("expires tomorrow", today=today)

        assert isinstance(result, AddCommand)
        assert result.name == "Pantry item"

    def test_location_only_uses_placeholder(self, today):
        result = parse_add_command("in the freezer", today=today)

        assert isinstance(result, AddCommand)
        assert result.name == "Pantry item"
        assert result.location == "freezer"

    def test_date_inside_location_is_consumed_first(self, today):
        """Test date extraction runs before location extraction."""
        result = parse_add_command("jam on shelf 2026-05-05", today=today)

        assert isinstance(result, AddCommand)
        assert result.name == "jam"
        assert result.location == "shelf"
        assert result.expiration_date == date(2026, 5, 5)

    def test_out_of_range_relative_date_uses_default(self, today):
        result = parse_add_command("milk in 100000000 days", today=today)

        assert result == AddCommand(name="milk", expiration_date=today + timedelta(days=7))

    def test_out_of_range_relative_date_with_expiry_language_fails(self, today):
        result = parse_add_command("milk expires in 100000 months", today=today)

        assert isinstance(result, ParseFailure)
        assert result.kind is ParseErrorKind.AMBIGUOUS_EXPIRY


@pytest.mark.unit
class TestExtractDeleteQuery:
    """Tests for extract_delete_query function."""

    @pytest.mark.parametrize(
        ("text", "phrase"),
        [
            ("delete the shaved steak", "shaved steak"),
            ("Remove my yogurt!", "yogurt"),
            ("please delete the item cheddar.", "cheddar"),
            ("remove that fridge stuff?!", "fridge stuff"),
            ("remove", ""),
            ("delete the", "the"),
        ],
    )
    def test_phrase_after_keyword(self, text, phrase):
        query = extract_delete_query(text)

        assert query is not None
        assert query.phrase == phrase

    def test_first_keyword_wins(self):
        query = extract_delete_query("remove milk and delete eggs")

        assert query is not None
        assert query.phrase == "milk and delete eggs"

    def test_no_keyword(self):
        assert extract_delete_query("3 avocados") is None


@pytest.mark.unit
class TestResolveDeleteTarget:
    """Tests for resolve_delete_target function."""

    def test_matches_by_name(self, make_item, today):
        inventory = [
            make_item("1", "Milk", today),
            make_item("2", "Shaved Steak", today + timedelta(days=2)),
        ]

        assert resolve_delete_target("delete the shaved steak", inventory) == DeleteTarget(item_id="2")

    def test_phrase_containing_name(self, make_item, today):
        inventory = [make_item("1", "Steak", today)]

        assert resolve_delete_target("delete the steak from costco", inventory) == DeleteTarget(item_id="1")

    def test_matches_by_location(self, make_item, today):
        inventory = [
            make_item("1", "Milk", today, location="fridge"),
            make_item("2", "Peas", today, location="freezer"),
        ]

        assert resolve_delete_target("remove the stuff in the freezer", inventory) == DeleteTarget(item_id="2")

    def test_soonest_expiration_wins(self, make_item, today):
        inventory = [
            make_item("late", "Greek yogurt", today + timedelta(days=9)),
            make_item("soon", "Vanilla yogurt", today + timedelta(days=2)),
        ]

        assert resolve_delete_target("remove yogurt", inventory) == DeleteTarget(item_id="soon")

    def test_tie_keeps_snapshot_order(self, make_item, today):
        inventory = [
            make_item("first", "yogurt", today),
            make_item("second", "yogurt", today),
        ]

        assert resolve_delete_target("delete yogurt", inventory) == DeleteTarget(item_id="first")

    def test_empty_phrase(self, make_item, today):
        result = resolve_delete_target("remove", [make_item("1", "Milk", today)])

        assert result == ParseFailure(kind=ParseErrorKind.EMPTY_DELETE_PHRASE)

    def test_not_found(self, make_item, today):
        result = resolve_delete_target("delete the caviar", [make_item("1", "Milk", today)])

        assert isinstance(result, ParseFailure)
        assert result.kind is ParseErrorKind.DELETE_NOT_FOUND

    def test_does_not_mutate_snapshot(self, make_item, today):
        inventory = [make_item("1", "Milk", today)]
        snapshot = list(inventory)

        resolve_delete_target("delete milk", inventory)

        assert inventory == snapshot


@pytest.mark.unit
class TestParseCommand:
    """Tests for parse_command dispatch."""

    def test_add_branch(self, today):
        result = parse_command("3 avocados", today=today)

        assert isinstance(result, AddCommand)

    def test_delete_branch(self, make_item, today):
        result = parse_command("delete milk", inventory=[make_item("7", "milk", today)], today=today)

        assert result == DeleteTarget(item_id="7")

    def test_delete_against_empty_inventory(self):
        result = parse_command("delete milk")

        assert isinstance(result, ParseFailure)
        assert result.kind is ParseErrorKind.DELETE_NOT_FOUND

    def test_delete_checked_before_expiry_parsing(self, make_item, today):
        """Test a delete utterance with unparseable expiry wording is still a delete."""
        result = parse_command("remove the milk that expires", inventory=[make_item("1", "Milk", today)])

        assert result == DeleteTarget(item_id="1")
