"""Tests for query options encoding."""

import dataclasses
import enum
from datetime import UTC, datetime

import httpx
import pytest

from github_client_core.errors import InvalidOptionsError, InvalidURLError
from github_client_core.options import ListOptions, RawType, UploadOptions, add_options, encode_query, query_field


class State(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclasses.dataclass
class IssueListOptions(ListOptions):
    state: State | None = query_field("state")
    labels: list[str] = query_field("labels", comma=True, default_factory=list)
    assignees: list[str] = query_field("assignee", default_factory=list)
    since: datetime | None = query_field("since")
    mine: bool = query_field("mine", default=False)
    sort: str = ""


@pytest.mark.unit
class TestAddOptions:
    def test_none_options_return_path_unchanged(self):
        """Test that no options leave the URL byte for byte unchanged."""
        assert add_options("repos/o/r/issues", None) == "repos/o/r/issues"
        assert add_options("search/code?q=x", None) == "search/code?q=x"

    def test_zero_options_return_path_unchanged(self):
        """Test that default-constructed options add nothing."""
        assert add_options("repos/o/r/issues", ListOptions()) == "repos/o/r/issues"

    def test_declared_keys_are_used(self):
        """Test that query keys come from field metadata."""
        assert add_options("user/repos", ListOptions(page=2, per_page=50)) == "user/repos?page=2&per_page=50"

    def test_existing_query_is_kept(self):
        """Test that parameters already in the URL survive."""
        url = add_options("search/repositories?q=httpx", ListOptions(page=3))
        params = httpx.URL(url).params
        assert params["q"] == "httpx"
        assert params["page"] == "3"

    def test_option_replaces_existing_parameter(self):
        """Test that an option overrides a same-named parameter in the URL."""
        url = add_options("user/repos?page=1", ListOptions(page=4))
        assert httpx.URL(url).params.get_list("page") == ["4"]

    def test_round_trip_reproduces_each_non_zero_field_once(self):
        """Test that each non-zero field appears exactly once in the query."""
        options = IssueListOptions(
            page=2,
            state=State.OPEN,
            labels=["bug", "ui"],
            assignees=["alice", "bob"],
            since=datetime(2017, 1, 2, 3, 4, 5, tzinfo=UTC),
            mine=True,
            sort="created",
        )
        params = httpx.URL(add_options("repos/o/r/issues", options)).params

        assert params.get_list("page") == ["2"]
        assert params.get_list("state") == ["open"]
        assert params.get_list("labels") == ["bug,ui"]
        assert params.get_list("assignee") == ["alice", "bob"]
        assert params.get_list("since") == ["2017-01-02T03:04:05Z"]
        assert params.get_list("mine") == ["true"]
        assert params.get_list("sort") == ["created"]
        assert "per_page" not in params

    def test_mapping_options(self):
        """Test that plain mappings encode like dataclasses."""
        url = add_options("users", {"since": 135, "per_page": 0, "filter": ""})
        assert url == "users?since=135"

    def test_unsupported_options_type(self):
        """Test that other option types raise InvalidOptionsError."""
        with pytest.raises(InvalidOptionsError):
            add_options("users", 42)

    def test_unparsable_url(self):
        """Test that a bad URL raises InvalidURLError."""
        with pytest.raises(InvalidURLError):
            add_options("users\n", ListOptions(page=1))


@pytest.mark.unit
def test_encode_query_flattens_nested_options():
    """Test that embedded ListOptions fields are flattened."""
    @dataclasses.dataclass
    class Wrapper:
        list_options: ListOptions = dataclasses.field(default_factory=ListOptions)
        name: str = query_field("name", default="asset.zip")

    assert encode_query(Wrapper(ListOptions(per_page=10))) == [("per_page", "10"), ("name", "asset.zip")]


@pytest.mark.unit
def test_upload_options():
    """Test the release asset name parameter."""
    assert encode_query(UploadOptions(name="build.tar.gz")) == [("name", "build.tar.gz")]
    assert encode_query(UploadOptions()) == []


@pytest.mark.unit
def test_raw_type_media_types():
    """Test the diff and patch media types."""
    assert RawType.DIFF.media_type == "application/vnd.github.v3.diff"
    assert RawType.PATCH.media_type == "application/vnd.github.v3.patch"
