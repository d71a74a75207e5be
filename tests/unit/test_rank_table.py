"""
Unit tests for RankTable: validation and effective-rank resolution.
"""

import pytest

from src.core.config.errors import ConfigValidationError
from src.domain.models.rank import DEFAULT_RANK_KEY, RankTable

NEROFERNO_GLYPH = "\u00a7f\ue02b\u00a7r"
DONADOR_GLYPH = "\u00a7f\ue031\u00a7r"
KILLUWU_GLYPH = "\ue02c"


def entry(key, priority, label=None, badge="user.png", aliases=None):
    return {
        "key": key,
        "priority": priority,
        "label": label or key.title(),
        "badge": badge,
        "aliases": aliases or [],
    }


@pytest.fixture
def rank_table(stats_config):
    return RankTable.from_config(stats_config.get("ranks"))


class TestRankTableFromConfig:
    def test_shipped_table_is_valid(self, rank_table):
        assert rank_table.keys == [
            "default",
            "donador",
            "fundador",
            "developer",
            "killuwu",
            "neroferno",
        ]

    def test_shipped_aliases_decode_to_glyphs(self, stats_config):
        aliases = {
            entry["key"]: entry["aliases"] for entry in stats_config.get("ranks")
        }

        assert aliases["donador"] == [DONADOR_GLYPH]
        assert aliases["killuwu"] == [KILLUWU_GLYPH]
        assert aliases["neroferno"] == [NEROFERNO_GLYPH]

    def test_rejects_non_list(self):
        with pytest.raises(ConfigValidationError):
            RankTable.from_config({"default": 0})

    def test_rejects_empty_list(self):
        with pytest.raises(ConfigValidationError):
            RankTable.from_config([])

    def test_rejects_missing_default(self):
        with pytest.raises(ConfigValidationError, match="default"):
            RankTable.from_config([entry("vip", 10)])

    def test_rejects_duplicate_key(self):
        with pytest.raises(ConfigValidationError, match="Duplicate rank key"):
            RankTable.from_config([entry("default", 0), entry("vip", 10), entry("VIP", 20)])

    def test_rejects_duplicate_priority(self):
        with pytest.raises(ConfigValidationError, match="priority"):
            RankTable.from_config([entry("default", 0), entry("vip", 10), entry("mvp", 10)])

    def test_rejects_alias_owned_by_two_keys(self):
        with pytest.raises(ConfigValidationError, match="maps to both"):
            RankTable.from_config(
                [
                    entry("default", 0),
                    entry("vip", 10, aliases=["[V]"]),
                    entry("mvp", 20, aliases=["[V]"]),
                ]
            )

    def test_rejects_alias_colliding_with_other_key(self):
        with pytest.raises(ConfigValidationError, match="collides"):
            RankTable.from_config(
                [entry("default", 0), entry("vip", 10, aliases=["MVP"]), entry("mvp", 20)]
            )

    def test_rejects_boolean_priority(self):
        with pytest.raises(ConfigValidationError, match="priority"):
            RankTable.from_config([entry("default", True)])

    def test_rejects_blank_badge(self):
        with pytest.raises(ConfigValidationError, match="badge"):
            RankTable.from_config([entry("default", 0, badge=" ")])


class TestRankTableResolve:
    @pytest.mark.parametrize(
        "tokens",
        [
            ["donador", NEROFERNO_GLYPH],
            [NEROFERNO_GLYPH, "donador"],
        ],
    )
    def test_highest_priority_wins_regardless_of_order(self, rank_table, tokens):
        """A donor who is also Neroferno is shown as Neroferno."""
        assignment = rank_table.resolve(tokens)

        assert assignment.key == "neroferno"
        assert assignment.label == "Neroferno"
        assert assignment.badge == "rank-neroferno.png"
        assert assignment.recognized is True

    def test_glyph_alias_recognized(self, rank_table):
        assert rank_table.resolve([KILLUWU_GLYPH]).key == "killuwu"
        assert rank_table.resolve([DONADOR_GLYPH]).key == "donador"

    def test_get_definition(self, rank_table):
        assert rank_table.get("neroferno").priority == 50
        assert rank_table.get("vip") is None

    def test_key_match_is_case_insensitive(self, rank_table):
        assert rank_table.normalize("DONADOR") == "donador"
        assert rank_table.normalize("  Fundador ") == "fundador"

    def test_unknown_token_normalizes_to_none(self, rank_table):
        assert rank_table.normalize("vip") is None

    def test_unrecognized_token_used_verbatim_with_default_badge(self, rank_table):
        assignment = rank_table.resolve(["VIP+"])

        assert assignment.key == DEFAULT_RANK_KEY
        assert assignment.label == "VIP+"
        assert assignment.badge == "user.png"
        assert assignment.recognized is False

    def test_default_token_counts_as_recognized(self, rank_table):
        assignment = rank_table.resolve(["Default", "builder"])

        assert assignment.label == "Default"
        assert assignment.recognized is True

    def test_recognized_beats_unrecognized(self, rank_table):
        assignment = rank_table.resolve(["builder", "fundador"])

        assert assignment.key == "fundador"
        assert assignment.label == "Fundador"

    def test_no_tokens_is_default(self, rank_table):
        assignment = rank_table.resolve([])

        assert assignment.key == DEFAULT_RANK_KEY
        assert assignment.label == "Default"
        assert assignment.badge == "user.png"

    def test_raw_tokens_preserved(self, rank_table):
        assignment = rank_table.resolve(["donador", "", "builder"])

        assert assignment.raw_tokens == ("donador", "builder")
