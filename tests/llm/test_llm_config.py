import tempfile
import unittest
from pathlib import Path

from app_config_schema import LLMSettings
from llm.config import LLMConfig
from llm.errors import LLMConfigurationError


class LLMConfigTests(unittest.TestCase):
    def test_anthropic_requires_api_key(self) -> None:
        with self.assertRaises(LLMConfigurationError):
            LLMConfig(backend="anthropic", api_key=" ")

    def test_unknown_backend_is_rejected(self) -> None:
        with self.assertRaises(LLMConfigurationError):
            LLMConfig(backend="openai", api_key="key")

    def test_sampling_ranges_are_validated(self) -> None:
        for overrides in (
            {"temperature": 1.5},
            {"top_p": -0.1},
            {"max_tokens": 0},
            {"timeout_seconds": 0},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(LLMConfigurationError):
                    LLMConfig(api_key="key", **overrides)

    def test_llama_requires_existing_model_file(self) -> None:
        with self.assertRaises(LLMConfigurationError):
            LLMConfig(backend="llama", model_path="/does/not/exist.gguf")

        with tempfile.TemporaryDirectory() as temp_dir:
            model_path = Path(temp_dir) / "planner.gguf"
            model_path.write_bytes(b"gguf")

            config = LLMConfig(backend="llama", model_path=str(model_path))
            self.assertIsNone(config.api_key)

            with self.assertRaises(LLMConfigurationError):
                LLMConfig(backend="llama", model_path=str(model_path), n_batch=0)

    def test_from_settings_copies_values(self) -> None:
        settings = LLMSettings(model="claude-test", max_tokens=1024, temperature=0.0)

        config = LLMConfig.from_settings(settings, api_key="key")

        self.assertEqual("anthropic", config.backend)
        self.assertEqual("claude-test", config.model)
        self.assertEqual(1024, config.max_tokens)
        self.assertEqual(0.0, config.temperature)
        self.assertEqual("key", config.api_key)


if __name__ == "__main__":
    unittest.main()
