# tests/test_config.py
"""Tests for configuration loading (docent.yaml, .env and DOCENT_* variables)."""

import os
from pathlib import Path

import pytest

from docent.config import (
    DEFAULT_DATA_DIR,
    ConfigError,
    DocentConfig,
    build_settings,
    find_config_file,
    get_docent_config,
    get_settings_from_env,
    get_settings_from_yaml,
    import_class,
    is_local_model,
    load_config,
    load_env_file,
    resolve_storage,
    validate_config,
)
from docent.settings import Settings

yaml = pytest.importorskip("yaml", reason="Tests require pyyaml (pip install docent-rag[yaml])")


def write_yaml(directory: str, data: dict, name: str = "docent.yaml") -> Path:
    path = Path(directory) / name
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadEnvFile:
    def test_missing_file_is_ignored(self, isolated_env):
        load_env_file(os.path.join(isolated_env, "missing.env"))

    def test_sets_variables(self, isolated_env, monkeypatch):
        # Registers the variable with monkeypatch so teardown removes it
        monkeypatch.setenv("DOCENT_TEST_KEY", "placeholder")
        monkeypatch.delenv("DOCENT_TEST_KEY")
        env_path = Path(isolated_env) / ".env"
        env_path.write_text(
            "# comment\n\nDOCENT_TEST_KEY='quoted value'\nnot a pair\n", encoding="utf-8"
        )

        load_env_file(env_path)

        assert os.environ["DOCENT_TEST_KEY"] == "quoted value"

    def test_existing_variables_win(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_TEST_KEY", "from-shell")
        env_path = Path(isolated_env) / ".env"
        env_path.write_text("DOCENT_TEST_KEY=from-file\n", encoding="utf-8")

        load_env_file(env_path)

        assert os.environ["DOCENT_TEST_KEY"] == "from-shell"


class TestFindConfigFile:
    def test_none_when_absent(self, isolated_env):
        assert find_config_file(Path(isolated_env)) is None

    def test_found_in_parent(self, isolated_env):
        write_yaml(isolated_env, {"llm_model": "openai/gpt-5"})
        nested = Path(isolated_env) / "a" / "b"
        nested.mkdir(parents=True)

        found = find_config_file(nested)

        assert found == Path(isolated_env) / "docent.yaml"

    def test_alternative_names(self, isolated_env):
        write_yaml(isolated_env, {}, name=".docentrc")
        assert find_config_file(Path(isolated_env)).name == ".docentrc"


class TestValidateConfig:
    def test_clean_config(self):
        assert validate_config({"llm_model": "x", "settings": {"default_k": 3}}) == []

    def test_unknown_root_keys(self):
        warnings = validate_config({"llm_modle": "x"}, Path("docent.yaml"))
        assert len(warnings) == 1
        assert "llm_modle" in warnings[0]
        assert "docent.yaml" in warnings[0]

    def test_unknown_settings_keys(self):
        warnings = validate_config({"settings": {"top_k": 3}})
        assert warnings == ["Unknown settings keys: top_k"]


class TestLoadConfig:
    def test_empty_without_file(self, isolated_env):
        assert load_config() == {}

    def test_explicit_path(self, isolated_env):
        path = write_yaml(isolated_env, {"llm_model": "openai/gpt-5"})
        assert load_config(path) == {"llm_model": "openai/gpt-5"}

    def test_searches_cwd(self, isolated_env):
        write_yaml(isolated_env, {"data_dir": "./elsewhere"})
        assert load_config()["data_dir"] == "./elsewhere"

    def test_empty_file(self, isolated_env):
        path = Path(isolated_env) / "docent.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == {}


class TestSettingsSources:
    def test_env_values_are_typed(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_SUMMARY_TRIGGER", "20")
        monkeypatch.setenv("DOCENT_GENERATE_TIMEOUT", "12.5")
        monkeypatch.setenv("DOCENT_TIMEOUT_PROFILE", "patient")

        assert get_settings_from_env() == {
            "summary_trigger": 20,
            "generate_timeout": 12.5,
            "timeout_profile": "patient",
        }

    def test_invalid_env_values_are_ignored(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_DEFAULT_K", "many")
        monkeypatch.setenv("DOCENT_EMBED_TIMEOUT", "soon")
        assert get_settings_from_env() == {}

    def test_yaml_settings_with_alias(self):
        config = {"settings": {"default_k": 8, "summary_timeout": 45, "ignored": True}}
        assert get_settings_from_yaml(config) == {"default_k": 8, "summarize_timeout": 45}

    def test_yaml_without_settings_section(self):
        assert get_settings_from_yaml({"settings": None}) == {}


class TestBuildSettings:
    def test_defaults(self):
        assert build_settings({}, {}) == Settings()

    def test_env_overrides_yaml(self):
        settings = build_settings(
            {"settings": {"default_k": 8, "summary_trigger": 20}},
            {"default_k": 2},
        )
        assert settings.default_k == 2
        assert settings.summary_trigger == 20

    def test_timeout_profile(self):
        settings = build_settings({"settings": {"timeout_profile": "patient"}}, {})
        assert settings.generate_timeout == 180.0
        assert settings.embed_timeout == 30.0

    def test_explicit_timeout_beats_profile(self):
        settings = build_settings(
            {"settings": {"timeout_profile": "interactive"}},
            {"generate_timeout": 99.0},
        )
        assert settings.generate_timeout == 99.0
        assert settings.rewrite_timeout == 8.0

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError):
            build_settings({"settings": {"summary_trigger": 4, "summary_keep": 4}}, {})


class TestResolveStorage:
    def test_defaults(self, isolated_env):
        assert resolve_storage() == (DEFAULT_DATA_DIR, "sqlite")

    def test_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_DATA_DIR", "/tmp/docent-env")
        monkeypatch.setenv("DOCENT_VECTOR_BACKEND", "chroma")
        assert resolve_storage() == ("/tmp/docent-env", "chroma")

    def test_yaml_beats_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_DATA_DIR", "/tmp/docent-env")
        write_yaml(isolated_env, {"data_dir": "./from-yaml"})
        assert resolve_storage()[0] == "./from-yaml"

    def test_argument_beats_everything(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_DATA_DIR", "/tmp/docent-env")
        write_yaml(isolated_env, {"data_dir": "./from-yaml"})
        assert resolve_storage("./explicit")[0] == "./explicit"


class TestGetDocentConfig:
    def test_missing_models(self, isolated_env):
        result = get_docent_config()

        assert isinstance(result, ConfigError)
        assert "llm_model" in result.message
        assert result.suggestion is not None

    def test_litellm_from_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_LITELLM_LLM_MODEL", "openai/gpt-5")
        monkeypatch.setenv("DOCENT_LITELLM_EMBEDDING_MODEL", "openai/text-embedding-3-small")
        monkeypatch.setenv("DOCENT_LLM_API_KEY", "sk-test")

        result = get_docent_config()

        assert isinstance(result, DocentConfig)
        assert result.provider == "litellm"
        assert result.llm_model == "openai/gpt-5"
        assert result.llm_api_key == "sk-test"
        assert result.data_dir == DEFAULT_DATA_DIR
        assert result.vector_backend == "sqlite"

    def test_litellm_from_yaml(self, isolated_env):
        write_yaml(
            isolated_env,
            {
                "llm_model": "ollama/llama3",
                "embedding_model": "ollama/nomic-embed-text",
                "summary_model": "ollama/llama3:8b",
                "embedding_dimensions": 768,
                "vector_backend": "chroma",
                "settings": {"default_k": 3},
            },
        )

        result = get_docent_config()

        assert isinstance(result, DocentConfig)
        assert result.summary_model == "ollama/llama3:8b"
        assert result.embedding_dimensions == 768
        assert result.vector_backend == "chroma"
        assert result.settings.default_k == 3

    def test_unknown_backend(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_VECTOR_BACKEND", "faiss")
        result = get_docent_config()
        assert isinstance(result, ConfigError)
        assert "faiss" in result.message

    def test_invalid_settings(self, isolated_env, monkeypatch):
        monkeypatch.setenv("DOCENT_LITELLM_LLM_MODEL", "openai/gpt-5")
        monkeypatch.setenv("DOCENT_LITELLM_EMBEDDING_MODEL", "openai/text-embedding-3-small")
        monkeypatch.setenv("DOCENT_CHUNK_SIZE", "100")
        monkeypatch.setenv("DOCENT_CHUNK_OVERLAP", "100")

        result = get_docent_config()

        assert isinstance(result, ConfigError)
        assert result.message.startswith("Invalid settings")

    def test_custom_provider(self, isolated_env):
        write_yaml(
            isolated_env,
            {
                "provider": "custom",
                "embedder": "my_pkg.MyEmbedder",
                "llm_client": "my_pkg.MyClient",
                "llm_client_kwargs": {"endpoint": "http://localhost"},
            },
        )

        result = get_docent_config()

        assert isinstance(result, DocentConfig)
        assert result.embedder_class == "my_pkg.MyEmbedder"
        assert result.llm_client_kwargs == {"endpoint": "http://localhost"}
        assert result.embedder_kwargs == {}

    def test_custom_provider_incomplete(self, isolated_env):
        write_yaml(isolated_env, {"provider": "custom", "embedder": "my_pkg.MyEmbedder"})
        assert isinstance(get_docent_config(), ConfigError)

    def test_unknown_provider(self, isolated_env):
        write_yaml(isolated_env, {"provider": "bedrock"})
        result = get_docent_config()
        assert isinstance(result, ConfigError)
        assert "bedrock" in result.message


class TestHelpers:
    @pytest.mark.parametrize(
        "model,expected",
        [
            ("ollama/llama3", True),
            ("openai/gpt-5", False),
            ("local/my-model", True),
            ("hf/model.GGUF", True),
        ],
    )
    def test_is_local_model(self, model, expected):
        assert is_local_model(model) is expected

    def test_import_class(self):
        assert import_class("docent.settings.Settings") is Settings

    def test_import_class_missing_module(self):
        with pytest.raises(ImportError):
            import_class("docent.nonexistent.Thing")
