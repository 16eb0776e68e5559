"""Unit tests for application settings configuration."""

from pathlib import Path

from chatalchemy.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_relative_data_dir_resolves_against_backend_dir():
    settings = Settings(data_dir="data")

    expected = Path(__file__).resolve().parents[2] / "data"
    assert Path(settings.data_dir) == expected


def test_absolute_data_dir_is_kept(tmp_path):
    settings = Settings(data_dir=str(tmp_path))

    assert settings.data_dir == str(tmp_path)


def test_non_positive_min_term_length_is_clamped():
    settings = Settings(min_term_length=0)

    assert settings.min_term_length == 1
