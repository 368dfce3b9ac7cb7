"""
QuizFlow test configuration.

Every test module gets its own project directory and a config file that
points drafts, exports and the log file into it. The quiz document
fixture is a small two-question builder document.
"""

import os

import pytest

from quizflow.config.settings import ConfigManager


@pytest.fixture(scope="session", autouse=True)
def clear_env_vars():
    """Hide QUIZFLOW_* variables from the developer shell for the whole run."""
    original_values = {}
    for var in list(os.environ):
        if var.startswith("QUIZFLOW_"):
            original_values[var] = os.environ.pop(var)

    yield

    for var, value in original_values.items():
        os.environ[var] = value


@pytest.fixture(scope="module")
def test_project_dir(tmp_path_factory, request):
    """Scratch directory shared by the tests of one module."""
    dirname = f"test_project_{request.module.__name__}"
    return tmp_path_factory.mktemp(dirname)


@pytest.fixture(scope="module")
def config_path(test_project_dir):
    """Writes a config file pointing all storage into the test project directory."""
    config_dir = test_project_dir / "test_config"
    config_dir.mkdir()
    config_path = config_dir / "test_config.yaml"
    config_path.write_text(f"""
drafts:
    type: "file"
    key: "quiz-builder-draft"
    file:
        base_dir: "{test_project_dir / 'drafts'}"
    sql:
        connection_string: "sqlite:///{test_project_dir / 'drafts.db'}"
export:
    output_dir: "{test_project_dir / 'exports'}"
    indent: 2
logging:
    version: 1
    disable_existing_loggers: false
    formatters:
        standard:
            format: "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    handlers:
        file:
            class: "logging.FileHandler"
            filename: "{test_project_dir / 'logs' / 'quizflow.log'}"
            level: "DEBUG"
            formatter: "standard"
    root:
        level: "DEBUG"
        handlers: ["file"]
""")
    return config_path


@pytest.fixture(scope="module", autouse=True)
def setup_config(config_path):
    """
    Setup the config file and environment variable.

    This fixture sets QUIZFLOW_CONFIG_PATH for the duration of the test
    module and resets the ConfigManager singleton around it.
    """
    original_config_path = os.environ.get("QUIZFLOW_CONFIG_PATH")
    os.environ["QUIZFLOW_CONFIG_PATH"] = str(config_path)
    ConfigManager.reset_instance()

    yield

    ConfigManager.reset_instance()
    if original_config_path:
        os.environ["QUIZFLOW_CONFIG_PATH"] = original_config_path
    else:
        os.environ.pop("QUIZFLOW_CONFIG_PATH", None)


@pytest.fixture
def quiz_document():
    """A small authoring document with both edge sets populated."""
    return {
        "quizDetails": {
            "name": "Fit Finder",
            "slug": "fit-finder",
            "requireLogin": False,
            "preQuiz": True,
        },
        "questions": [
            {
                "id": 10,
                "title": "Color?",
                "type": "single-choice",
                "stepType": "question",
                "required": True,
                "options": ["Red", "Blue"],
            },
            {
                "id": 20,
                "title": "Size?",
                "type": "text",
                "stepType": "question",
                "required": False,
                "options": [],
            },
        ],
        "results": [
            {
                "id": 5,
                "title": "Winner",
                "isDefault": True,
                "products": [{"name": "Shirt", "price": "19.99", "isPrimary": True}],
            },
        ],
        "logic": {
            "nodes": [],
            "edges": [
                {"id": "e1", "source": "question-10", "sourceHandle": "option-0",
                 "target": "question-20"},
            ],
        },
        "logicResults": {
            "nodes": [],
            "edges": [
                {"id": "e2", "source": "question-20", "target": "result-5-out"},
            ],
        },
        "currentStep": 3,
    }
