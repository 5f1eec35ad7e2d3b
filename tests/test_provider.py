import base64
import json
import unittest

from google.api_core.exceptions import ResourceExhausted

from kidquiz.categories import Category
from kidquiz.config import AppConfig
from kidquiz.errors import ProviderFailure
from kidquiz.provider import (
    QUESTION_SCHEMA,
    GeminiProvider,
    QuizImage,
    build_image_prompt,
    build_question_prompt,
    extract_json_array,
)

from tests.fakes import (
    FakeGeminiModel,
    image_response,
    inline_part,
    make_record,
    png_bytes,
    text_part,
    text_response,
)


def config(**overrides) -> AppConfig:
    values = {"gemini_api_key": "test-key"}
    values.update(overrides)
    return AppConfig(**values)


class FactoryRecorder:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.models = []

    def __call__(self, name):
        model = FakeGeminiModel(name, response=self.response, error=self.error)
        self.models.append(model)
        return model


class PromptTests(unittest.TestCase):
    def test_question_prompt(self) -> None:
        prompt = build_question_prompt(Category.COMPREHENSION, 8, "3rd-grade students")
        self.assertIn("Generate 8", prompt)
        self.assertIn("Reading Adventure", prompt)
        self.assertIn("passage", prompt)
        self.assertIn("correctAnswer", prompt)

    def test_image_prompt(self) -> None:
        prompt = build_image_prompt("a smiling turtle")
        self.assertIn("a smiling turtle", prompt)
        self.assertIn("claymation", prompt)


class ExtractJsonTests(unittest.TestCase):
    def test_plain_array(self) -> None:
        self.assertEqual(extract_json_array('[{"id": "a"}]'), [{"id": "a"}])

    def test_fenced_array(self) -> None:
        text = '```json\n[{"id": "a"}]\n```'
        self.assertEqual(extract_json_array(text), [{"id": "a"}])

    def test_wrapped_object(self) -> None:
        self.assertEqual(extract_json_array('{"questions": [1, 2]}'), [1, 2])

    def test_failures(self) -> None:
        for text in ("", "not json", '{"id": "a"}'):
            with self.assertRaises(ProviderFailure):
                extract_json_array(text)


class GenerateQuestionsTests(unittest.TestCase):
    def test_valid_batch(self) -> None:
        records = [make_record(n) for n in range(1, 9)]
        factory = FactoryRecorder(response=text_response(json.dumps(records)))
        provider = GeminiProvider(config(question_model="test-model"), model_factory=factory)

        questions = provider.generate_questions(Category.ANIMALS)

        self.assertEqual(len(questions), 8)
        self.assertTrue(all(q.category is Category.ANIMALS for q in questions))
        self.assertEqual(factory.models[0].name, "test-model")
        generation_config = factory.models[0].kwargs[0]["generation_config"]
        self.assertEqual(generation_config["response_mime_type"], "application/json")
        self.assertIs(generation_config["response_schema"], QUESTION_SCHEMA)

    def test_schema_requires_every_record_field(self) -> None:
        self.assertEqual(QUESTION_SCHEMA["type"], "ARRAY")
        item = QUESTION_SCHEMA["items"]
        self.assertEqual(
            set(item["required"]),
            {"id", "prompt", "options", "correctAnswer", "imageDescription", "explanation"},
        )
        self.assertNotIn("passage", item["required"])
        self.assertIn("passage", item["properties"])
        self.assertEqual(item["properties"]["options"]["items"], {"type": "STRING"})

    def test_malformed_records_are_dropped(self) -> None:
        records = [make_record(1), make_record(2, correctAnswer="nope")]
        factory = FactoryRecorder(response=text_response(json.dumps(records)))
        provider = GeminiProvider(config(), model_factory=factory)
        questions = provider.generate_questions(Category.ANIMALS)
        self.assertEqual([q.id for q in questions], ["q1"])

    def test_unparsable_text_is_empty(self) -> None:
        factory = FactoryRecorder(response=text_response("Sorry, I can't do that"))
        provider = GeminiProvider(config(), model_factory=factory)
        with self.assertLogs("kidquiz.provider", level="ERROR"):
            self.assertEqual(provider.generate_questions(Category.MATH), [])
        self.assertIn("invalid JSON", provider.last_error)

    def test_api_error_is_empty(self) -> None:
        factory = FactoryRecorder(error=RuntimeError("network down"))
        provider = GeminiProvider(config(), model_factory=factory)
        with self.assertLogs("kidquiz.provider", level="ERROR"):
            self.assertEqual(provider.generate_questions(Category.MATH), [])

    def test_quota_error_is_empty(self) -> None:
        factory = FactoryRecorder(error=ResourceExhausted("quota"))
        provider = GeminiProvider(config(), model_factory=factory)
        with self.assertLogs("kidquiz.provider", level="ERROR"):
            self.assertEqual(provider.generate_questions(Category.MATH), [])
        self.assertIn("429", provider.last_error)

    def test_no_key_makes_no_request(self) -> None:
        factory = FactoryRecorder(response=text_response("[]"))
        cfg = config()
        cfg.gemini_api_key = ""
        provider = GeminiProvider(cfg, model_factory=factory)
        with self.assertLogs("kidquiz.provider", level="ERROR"):
            self.assertEqual(provider.generate_questions(Category.ANIMALS), [])
        self.assertEqual(factory.models, [])


class GenerateImageTests(unittest.TestCase):
    def test_first_inline_image_is_returned(self) -> None:
        png = png_bytes()
        response = image_response(text_part("here you go"), inline_part(png, "image/png"))
        factory = FactoryRecorder(response=response)
        provider = GeminiProvider(config(image_model="img-model"), model_factory=factory)

        image = provider.generate_image("a happy whale")

        self.assertEqual(image, QuizImage(data=png, mime_type="image/png"))
        self.assertEqual(factory.models[0].name, "img-model")
        self.assertIn("a happy whale", factory.models[0].prompts[0])
        self.assertIn("1:1", factory.models[0].prompts[0])

    def test_base64_string_payload_is_decoded(self) -> None:
        png = png_bytes()
        encoded = base64.b64encode(png).decode("ascii")
        factory = FactoryRecorder(response=image_response(inline_part(encoded)))
        provider = GeminiProvider(config(), model_factory=factory)
        self.assertEqual(provider.generate_image("x").data, png)

    def test_non_image_part_is_skipped(self) -> None:
        png = png_bytes()
        response = image_response(
            inline_part(b"not an image", mime_type="text/plain"),
            inline_part(png, "image/png"),
        )
        provider = GeminiProvider(config(), model_factory=FactoryRecorder(response=response))
        self.assertEqual(provider.generate_image("a fox").data, png)

    def test_only_non_image_part_is_none(self) -> None:
        response = image_response(inline_part(b"not an image", mime_type="text/plain"))
        provider = GeminiProvider(config(), model_factory=FactoryRecorder(response=response))
        with self.assertLogs("kidquiz.provider", level="WARNING"):
            self.assertIsNone(provider.generate_image("a fox"))

    def test_undecodable_image_bytes_are_none(self) -> None:
        response = image_response(inline_part(b"\x00garbage", mime_type="image/png"))
        provider = GeminiProvider(config(), model_factory=FactoryRecorder(response=response))
        with self.assertLogs("kidquiz.provider", level="WARNING") as logs:
            self.assertIsNone(provider.generate_image("a fox"))
        self.assertIn("unreadable image payload", logs.output[0])

    def test_no_image_part_is_none(self) -> None:
        factory = FactoryRecorder(response=image_response(text_part("no picture today")))
        provider = GeminiProvider(config(), model_factory=factory)
        with self.assertLogs("kidquiz.provider", level="WARNING"):
            self.assertIsNone(provider.generate_image("a cat"))

    def test_error_is_none(self) -> None:
        factory = FactoryRecorder(error=RuntimeError("boom"))
        provider = GeminiProvider(config(), model_factory=factory)
        with self.assertLogs("kidquiz.provider", level="WARNING"):
            self.assertIsNone(provider.generate_image("a cat"))


if __name__ == "__main__":
    unittest.main()
