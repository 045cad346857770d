from models.language import Language
from services.analysis.name_extractor import extract_medicine_name
from services.analysis.prompts import (
    FOLLOW_UP_TEMPLATES,
    SECTION_PROMPTS,
    SECTION_TITLES,
    follow_up_prompt,
    section_keys,
)

EXPECTED_KEYS = ("identification", "composition", "therapeutic", "dosage", "safety", "storage", "manufacturer")


class TestPromptCatalog:
    def test_every_language_defines_the_same_sections_in_order(self):
        for language in Language:
            assert section_keys(language) == EXPECTED_KEYS
            assert tuple(SECTION_TITLES[language]) == EXPECTED_KEYS
            assert all(SECTION_PROMPTS[language][key].strip() for key in EXPECTED_KEYS)

    def test_follow_up_wraps_analysis_and_question(self):
        wrapped = follow_up_prompt(Language.EN, "MEDICINE NAME: Cetamol", "Can I take it with food?")
        assert wrapped.startswith("You are a knowledgeable medical assistant.")
        assert "MEDICINE NAME: Cetamol" in wrapped
        assert "Can I take it with food?" in wrapped

    def test_nepali_follow_up_uses_nepali_template(self):
        wrapped = follow_up_prompt(Language.NP, "X", "Y")
        assert wrapped == FOLLOW_UP_TEMPLATES[Language.NP].format(initial_analysis="X", question="Y")
        assert "मेडिकल सहायक" in wrapped


class TestLanguage:
    def test_parse_defaults_to_english(self):
        assert Language.parse(None) is Language.EN
        assert Language.parse("NP") is Language.NP

    def test_parse_rejects_unknown_codes(self):
        try:
            Language.parse("fr")
        except ValueError as exc:
            assert "fr" in str(exc)
        else:
            raise AssertionError("expected ValueError")


class TestNameExtractor:
    def test_structured_label(self):
        text = "MEDICINE NAME: Paracetamol 500mg\nCATEGORY: Analgesic"
        assert extract_medicine_name(text) == "Paracetamol 500mg"

    def test_nepali_structured_label(self):
        text = "औषधिको नाम: सिटामोल\nवर्ग: दुखाइ निवारक"
        assert extract_medicine_name(text, Language.NP) == "सिटामोल"

    def test_empty_text_returns_placeholder(self):
        assert extract_medicine_name("") == "Unknown Medicine"
        assert extract_medicine_name("", Language.NP) == "अज्ञात औषधि"
        assert extract_medicine_name(None) == "Unknown Medicine"

    def test_long_undelimited_first_line_returns_placeholder(self):
        text = "x" * 80
        assert extract_medicine_name(text) == "Unknown Medicine"

    def test_long_first_line_is_cut_at_first_comma(self):
        text = "Amoxicillin capsules, an antibiotic used for many bacterial infections in adults"
        assert extract_medicine_name(text) == "Amoxicillin capsules"

    def test_narrative_pattern_strips_filler_word(self):
        text = "Looking closely, the medicine is the Ibuprofen 400. It relieves pain."
        assert extract_medicine_name(text) == "Ibuprofen 400"

    def test_quoted_medicine_name(self):
        text = 'I can see the medicine "Cetirizine" on this strip\nIt treats allergies'
        assert extract_medicine_name(text) == "Cetirizine"

    def test_first_line_filler_is_removed(self):
        assert extract_medicine_name("The Omeprazole package\nMore text") == "Omeprazole"

    def test_blank_structured_label_gives_placeholder(self):
        text = "Paracetamol strip\nMEDICINE NAME: "
        assert extract_medicine_name(text) == "Unknown Medicine"
        assert extract_medicine_name("सिटामोल\nऔषधिको नाम: ", Language.NP) == "अज्ञात औषधि"
