import pytest
from pydantic import ValidationError

from sharenow.schemas import PostCreate, TaskModuleSubmit, TeamTagUpdate

VALID_POST = {
    "type": 1,
    "title": "Structured concurrency",
    "description": "s" * 150,
    "contentUrl": "https://example.com/structured-concurrency",
    "tags": "python;async",
}


def test_post_create_accepts_camel_case_body():
    post = PostCreate.model_validate(VALID_POST)
    assert post.content_url == "https://example.com/structured-concurrency"


@pytest.mark.parametrize(
    "override",
    [
        {"type": 6},
        {"title": "t" * 101},
        {"description": "d" * 149},
        {"description": "d" * 301},
        {"contentUrl": "ftp://example.com/file"},
        {"contentUrl": "not a url"},
        {"tags": "a;b;c;d"},
        {"tags": "python;;api"},
        {"tags": "x" * 21},
    ],
)
def test_post_create_rejects_invalid_fields(override):
    with pytest.raises(ValidationError):
        PostCreate.model_validate({**VALID_POST, **override})


def test_team_tags_allow_five_tags_or_none():
    assert TeamTagUpdate.model_validate({"teamId": "t", "tags": "a;b;c;d;e"}).tags == "a;b;c;d;e"
    assert TeamTagUpdate.model_validate({"teamId": "t"}).tags == ""
    with pytest.raises(ValidationError):
        TeamTagUpdate.model_validate({"teamId": "t", "tags": "a;b;c;d;e;f"})


def test_task_module_submit_parses_preference_details():
    submit = TaskModuleSubmit.model_validate(
        {
            "command": "submit",
            "configureDetails": {"teamId": "team-1", "digestFrequency": "Monthly", "tags": "python"},
        }
    )
    assert submit.configure_details.digest_frequency == "Monthly"

    with pytest.raises(ValidationError):
        TaskModuleSubmit.model_validate(
            {"command": "submit", "configureDetails": {"teamId": "team-1", "digestFrequency": "Daily"}}
        )
