"""
Tests for git_changelog.changelog.

Covers:
- Creating version and category sections in an empty or existing document.
- Ordering of version sections and of Features before Bugfixes.
- Duplicate suppression across categories.
- Message punctuation and preservation of unrelated content.
"""

import pytest

from git_changelog.changelog import Changelog, format_message, parse_version_heading
from git_changelog.core.document_model import extract_text
from git_changelog.core.entry import Entry, EntryType
from git_changelog.core.version import Version


def make_entry(number, entry_type=EntryType.FEATURE, message="Initial commit", version="1.2.7"):
    return Entry(
        number=number,
        type=entry_type,
        url=f"https://github.com/influxdata/changelog/pull/{number}",
        message=message,
        version=Version.parse(version),
    )


RELEASED = """## v1.3.0 [2018-02-03]

### Features

- [#1](https://github.com/influxdata/changelog/pull/1): Initial commit.
"""

UNRELEASED = """## v1.4.0 [unreleased]

### Features

- [#2](https://github.com/influxdata/changelog/pull/2): A new feature.

### Bugfixes

- [#3](https://github.com/influxdata/changelog/pull/3): An embarrassing bug.

""" + RELEASED


class TestNewSections:
    """Test section creation"""

    def test_empty_document(self):
        c = Changelog()
        assert c.add_entry(make_entry(1))
        assert c.render() == """## v1.2.7 [unreleased]

### Features

- [#1](https://github.com/influxdata/changelog/pull/1): Initial commit.
"""

    def test_newer_version_goes_first(self):
        c = Changelog.parse(RELEASED)
        c.add_entry(make_entry(2, message="A new feature", version="1.4.0"))
        assert c.render() == """## v1.4.0 [unreleased]

### Features

- [#2](https://github.com/influxdata/changelog/pull/2): A new feature.

""" + RELEASED

    def test_patch_release_between_versions(self):
        c = Changelog.parse(UNRELEASED)
        c.add_entry(make_entry(4, EntryType.BUGFIX, "An embarrassing bug", "1.3.1"))
        assert c.render() == """## v1.4.0 [unreleased]

### Features

- [#2](https://github.com/influxdata/changelog/pull/2): A new feature.

### Bugfixes

- [#3](https://github.com/influxdata/changelog/pull/3): An embarrassing bug.

## v1.3.1 [unreleased]

### Bugfixes

- [#4](https://github.com/influxdata/changelog/pull/4): An embarrassing bug.

""" + RELEASED
        assert [str(v) for v, _ in c.versions()] == ["1.4.0", "1.3.1", "1.3.0"]

    def test_older_version_appended(self):
        c = Changelog.parse(RELEASED)
        c.add_entry(make_entry(9, EntryType.BUGFIX, "Old fix", "1.2.5"))
        versions = c.versions()
        assert [str(v) for v, _ in versions] == ["1.3.0", "1.2.5"]
        assert versions[1][1] == "unreleased"

    def test_features_created_before_bugfixes(self):
        c = Changelog.parse("""## v1.4.0 [unreleased]

### Bugfixes

- [#3](https://github.com/influxdata/changelog/pull/3): An embarrassing bug.
""")
        c.add_entry(make_entry(5, message="A feature", version="1.4.0"))
        assert c.render() == """## v1.4.0 [unreleased]

### Features

- [#5](https://github.com/influxdata/changelog/pull/5): A feature.

### Bugfixes

- [#3](https://github.com/influxdata/changelog/pull/3): An embarrassing bug.
"""

    def test_bugfixes_created_after_features(self):
        c = Changelog.parse(RELEASED)
        c.add_entry(make_entry(6, EntryType.BUGFIX, "A fix", "1.3.0"))
        assert c.render() == RELEASED + """
### Bugfixes

- [#6](https://github.com/influxdata/changelog/pull/6): A fix.
"""


class TestExistingSections:
    """Test insertion into sections that already exist"""

    def test_appends_to_existing_list(self):
        c = Changelog.parse(UNRELEASED)
        c.add_entry(make_entry(7, message="Another feature", version="1.4.0"))
        text = c.render()
        assert (
            "- [#2](https://github.com/influxdata/changelog/pull/2): A new feature.\n"
            "- [#7](https://github.com/influxdata/changelog/pull/7): Another feature.\n"
        ) in text
        assert text.count("## v1.4.0") == 1
        assert text.count("### Features") == 2

    def test_setext_version_heading(self):
        c = Changelog.parse("""v1.3.0 [2018-02-03]
-------------------

### Features

- [#1](https://github.com/influxdata/changelog/pull/1): Initial commit.
""")
        c.add_entry(make_entry(8, message="Late feature", version="1.3.0"))
        assert c.render() == """## v1.3.0 [2018-02-03]

### Features

- [#1](https://github.com/influxdata/changelog/pull/1): Initial commit.
- [#8](https://github.com/influxdata/changelog/pull/8): Late feature.
"""

    def test_list_inserted_when_heading_has_text(self):
        c = Changelog.parse("""## v1.4.0 [unreleased]

### Features

Nothing yet.
""")
        c.add_entry(make_entry(2, message="A new feature", version="1.4.0"))
        assert c.render() == """## v1.4.0 [unreleased]

### Features

- [#2](https://github.com/influxdata/changelog/pull/2): A new feature.

Nothing yet.
"""

    def test_loose_list_gets_paragraph_item(self):
        c = Changelog.parse("""## v1.4.0 [unreleased]

### Features

- [#2](https://github.com/influxdata/changelog/pull/2): A new feature.

- [#3](https://github.com/influxdata/changelog/pull/3): Another feature.
""")
        c.add_entry(make_entry(4, message="Third", version="1.4.0"))
        entries = c.ast.blocks[2]
        assert entries["tight"] is False
        assert len(entries["children"]) == 3
        assert entries["children"][-1]["children"][0]["type"] == "paragraph"

    def test_multi_paragraph_message_keeps_list_tight(self):
        c = Changelog()
        c.add_entry(make_entry(1, message="Title\n\nMore body"))
        c.add_entry(make_entry(2, message="Second"))
        text = c.render()
        assert (
            "- [#1](https://github.com/influxdata/changelog/pull/1): Title More body.\n"
            "- [#2](https://github.com/influxdata/changelog/pull/2): Second.\n"
        ) in text

        reparsed = Changelog.parse(text)
        assert reparsed.ast.blocks[2]["tight"] is True
        assert reparsed.render() == text

    def test_preserves_unrelated_content(self):
        c = Changelog.parse("""# Changelog

Some intro text.

""" + RELEASED)
        c.add_entry(make_entry(7, EntryType.BUGFIX, "Fix a crash", "1.4.0"))
        assert c.render() == """# Changelog

Some intro text.

## v1.4.0 [unreleased]

### Bugfixes

- [#7](https://github.com/influxdata/changelog/pull/7): Fix a crash.

""" + RELEASED

    def test_malformed_heading_is_skipped(self):
        c = Changelog.parse("""## v1.x [unreleased]

## v1.0.0 [2020-01-01]
""")
        c.add_entry(make_entry(3, version="1.1.0"))
        headings = [b for b in c.ast.blocks if b["type"] == "heading" and b["attrs"]["level"] == 2]
        assert [extract_text(h) for h in headings] == [
            "v1.x [unreleased]",
            "v1.1.0 [unreleased]",
            "v1.0.0 [2020-01-01]",
        ]


class TestDuplicates:
    """Test duplicate suppression"""

    def test_same_number_same_category(self):
        c = Changelog.parse(UNRELEASED)
        before = c.render()
        assert not c.add_entry(make_entry(2, message="A new feature", version="1.4.0"))
        assert c.render() == before

    def test_same_number_other_category(self):
        c = Changelog.parse(UNRELEASED)
        before = c.render()
        assert not c.add_entry(make_entry(3, EntryType.FEATURE, "Now a feature", "1.4.0"))
        assert c.render() == before

    def test_same_number_in_other_version_is_added(self):
        c = Changelog.parse(UNRELEASED)
        assert c.add_entry(make_entry(1, EntryType.BUGFIX, "Backported", "1.4.0"))
        assert c.render().count("[#1]") == 2

    def test_idempotent_on_repeat(self):
        c = Changelog()
        entry = make_entry(1)
        c.add_entry(entry)
        first = c.render()
        c.add_entry(entry)
        assert c.render() == first


class TestDroppedEntries:
    """Test unrecognized entries"""

    def test_unknown_type_is_dropped(self):
        c = Changelog()
        assert not c.add_entry(make_entry(1, EntryType.UNKNOWN))
        assert c.ast.blocks == []


class TestHelpers:
    """Test module helpers"""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Add a feature", "Add a feature."),
            ("Done.", "Done."),
            ("Finally!", "Finally!"),
            ("Why?", "Why?"),
            ("Title\n\nMore body", "Title More body."),
            ("  Wrapped\nline!\n", "Wrapped line!"),
        ],
    )
    def test_format_message(self, message, expected):
        assert format_message(message) == expected

    def test_parse_version_heading(self):
        version, label = parse_version_heading("v1.4.0 [unreleased]")
        assert version == Version.parse("1.4.0")
        assert label == "unreleased"
        assert parse_version_heading("Features") is None
        assert parse_version_heading("1.4.0 [unreleased]") is None

    def test_write_file(self, tmp_path):
        path = tmp_path / "CHANGELOG.md"
        c = Changelog()
        c.add_entry(make_entry(1))
        c.write_file(path)
        assert Changelog.parse_file(path).render() == path.read_text(encoding="utf-8")
