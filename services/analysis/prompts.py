"""Prompt catalog and localized strings for medicine analysis and chat.

Section templates are keyed by language and section key. Declaration order
of `SECTION_PROMPTS[Language.EN]` is the order sections appear in the
assembled report. Both languages must define the same section keys; this is
checked when the module is imported.
"""

from __future__ import annotations

from typing import Dict, Tuple

from models.language import Language

SECTION_PROMPTS: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "identification": """Please analyze this product and provide the following information:
1. Product name as shown on package
2. Product category/type
3. Registration information if visible
4. Manufacturer details

Please format as:
Name:
Category:
Manufacturer:
Registration:""",
        "composition": """Please analyze and list:
1. Main components and their quantities
2. Additional components if visible
3. Standard formulation details if available

Format as:
Main Components:
- [component]: [quantity]
Additional Components:
- [list]""",
        "therapeutic": """Please provide information about:
1. Primary purposes
2. How it functions
3. Expected outcomes
4. Research-based information

Format as:
Primary Purposes:
Function:
Expected Outcomes:""",
        "dosage": """Please provide information about:
1. Usage instructions
2. Recommended timing
3. Duration guidelines
4. Best practices

Format as:
Instructions:
Timing:
Duration:
Best Practices:""",
        "safety": """Please provide information about:
1. Important precautions
2. Usage considerations
3. Common effects
4. Interaction guidelines

Format as:
Precautions:
Considerations:
Effects:
Guidelines:""",
        "storage": """Please provide:
1. Storage recommendations
2. Duration of effectiveness
3. Handling guidelines

Format as:
Storage:
Duration:
Guidelines:""",
        "manufacturer": """Please provide:
1. Company information
2. Contact details
3. Website if available

Format as:
Company:
Contact:
Website:""",
    },
    Language.NP: {
        "identification": """तपाईं एक औषधि पहिचान विशेषज्ञ हुनुहुन्छ। यो औषधि प्याकेजमा हेर्नुहोस् र मलाई बताउनुहोस्:
1. सटीक औषधिको नाम
2. निर्माताको नाम
3. कुनै दर्ता/लाइसेन्स नम्बरहरू देखिन्छन्
4. औषधिको प्रकार/वर्ग

जानकारी यस ढाँचामा प्रस्तुत गर्नुहोस्:
नाम:
वर्ग:
निर्माता:
दर्ता:""",
        "composition": """तपाईं एक फार्मास्युटिकल संरचना विशेषज्ञ हुनुहुन्छ। यस औषधिको लागि:
1. सबै सक्रिय तत्वहरू र तिनको मात्रा सूचीबद्ध गर्नुहोस्
2. सबै निष्क्रिय तत्वहरू सूचीबद्ध गर्नुहोस् यदि देखिन्छ भने
3. मानक फर्मुलेसन विवरणहरू फेला पार्नुहोस्

यस ढाँचामा:
सक्रिय तत्वहरू:
- [तत्व]: [मात्रा]
निष्क्रिय तत्वहरू:
- [सूची]""",
        "therapeutic": """तपाईं एक चिकित्सा विशेषज्ञ हुनुहुन्छ। यस औषधिको लागि:
1. यसको प्राथमिक प्रयोगहरू अनुसन्धान र व्याख्या गर्नुहोस्
2. यसको कार्य प्रक्रिया वर्णन गर्नुहोस्
3. अपेक्षित लाभहरू सूचीबद्ध गर्नुहोस्
4. चिकित्सा डाटाबेस र क्लिनिकल अध्ययनहरू प्रयोग गर्नुहोस्

यस ढाँचामा:
प्राथमिक प्रयोगहरू:
कार्य प्रक्रिया:
अपेक्षित लाभहरू:""",
        "dosage": """तपाईं एक औषधि मात्रा विशेषज्ञ हुनुहुन्छ। यस औषधिको लागि:
1. मानक मात्रा निर्देशनहरू प्रदान गर्नुहोस्
2. प्रशासन विधि व्याख्या गर्नुहोस्
3. समय सिफारिसहरू निर्दिष्ट गर्नुहोस्
4. अवधि दिशानिर्देशहरू समावेश गर्नुहोस्

यस ढाँचामा:
मानक मात्रा:
विधि:
समय:
अवधि:""",
        "safety": """तपाईं एक औषधि सुरक्षा विशेषज्ञ हुनुहुन्छ। यस औषधिको लागि:
1. सबै महत्वपूर्ण चेतावनीहरू सूचीबद्ध गर्नुहोस्
2. प्रतिकूल स्थितिहरू निर्दिष्ट गर्नुहोस्
3. सम्भावित साइड इफेक्टहरू विस्तृत गर्नुहोस्
4. ज्ञात औषधि अन्तर्क्रियाहरू सूचीबद्ध गर्नुहोस्

यस ढाँचामा:
चेतावनीहरू:
प्रतिकूल स्थितिहरू:
साइड इफेक्टहरू:
औषधि अन्तर्क्रियाहरू:""",
        "storage": """तपाईं एक फार्मास्युटिकल भण्डारण विशेषज्ञ हुनुहुन्छ। यस औषधिको लागि:
1. भण्डारण अवस्थाहरू निर्दिष्ट गर्नुहोस्
2. शेल्फ लाइफ बताउनुहोस्
3. कुनै विशेष ह्यान्डलिङ निर्देशनहरू सूचीबद्ध गर्नुहोस्

यस ढाँचामा:
भण्डारण अवस्थाहरू:
शेल्फ लाइफ:
विशेष निर्देशनहरू:""",
        "manufacturer": """तपाईं एक फार्मास्युटिकल कम्पनी अनुसन्धानकर्ता हुनुहुन्छ। यस निर्माताको लागि:
1. पूर्ण कम्पनी विवरणहरू प्रदान गर्नुहोस्
2. आधिकारिक सम्पर्क जानकारी फेला पार्नुहोस्
3. कम्पनी वेबसाइट प्रमाणित गर्नुहोस्

यस ढाँचामा:
कम्पनी:
सम्पर्क:
वेबसाइट:""",
    },
}

SECTION_TITLES: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "identification": "MEDICINE OVERVIEW",
        "composition": "COMPOSITION",
        "therapeutic": "THERAPEUTIC INFORMATION",
        "dosage": "DOSAGE & ADMINISTRATION",
        "safety": "SAFETY INFORMATION",
        "storage": "STORAGE & HANDLING",
        "manufacturer": "MANUFACTURER INFORMATION",
    },
    Language.NP: {
        "identification": "औषधि विवरण",
        "composition": "संरचना",
        "therapeutic": "चिकित्सकीय जानकारी",
        "dosage": "मात्रा र प्रशासन",
        "safety": "सुरक्षा जानकारी",
        "storage": "भण्डारण र ह्यान्डलिङ",
        "manufacturer": "निर्माता जानकारी",
    },
}

INITIAL_ANALYSIS_PROMPTS: Dict[Language, str] = {
    Language.EN: """Analyze this medicine package and provide a clear, simple analysis in this format:

MEDICINE NAME: [Name as shown on package]
CATEGORY: [Type of medicine]

KEY INFORMATION:
---------------
1. ACTIVE INGREDIENTS:
   - [Main ingredients with amounts]

2. USES:
   - [Main uses/purpose]

3. DOSAGE:
   - [Basic dosage info]

4. WARNINGS:
   - [Key safety warnings]

Keep it simple and clear. Focus on the most important information visible on the package.""",
    Language.NP: """यो औषधि प्याकेज विश्लेषण गर्नुहोस् र यो ढाँचामा स्पष्ट, सरल विश्लेषण प्रदान गर्नुहोस्:

औषधिको नाम: [प्याकेजमा देखाइएको नाम]
वर्ग: [औषधिको प्रकार]

मुख्य जानकारी:
-------------
1. सक्रिय तत्वहरू:
   - [मात्रासहित मुख्य तत्वहरू]

2. प्रयोगहरू:
   - [मुख्य प्रयोग/उद्देश्य]

3. मात्रा:
   - [आधारभूत मात्रा जानकारी]

4. चेतावनीहरू:
   - [मुख्य सुरक्षा चेतावनीहरू]

सरल र स्पष्ट राख्नुहोस्। प्याकेजमा देखिने सबैभन्दा महत्वपूर्ण जानकारीमा ध्यान दिनुहोस्।""",
}

FOLLOW_UP_TEMPLATES: Dict[Language, str] = {
    Language.EN: """You are a knowledgeable medical assistant. Based on this medicine information:
{initial_analysis}

Please answer this question:
{question}

Important guidelines:
1. Always provide specific information based on the medicine details provided
2. If information is not available in the analysis, provide general information about similar medicines
3. Use bullet points for clarity
4. Bold important warnings or key points
5. Keep the response concise but informative
6. Never say "the provided text does not list..." - instead, provide relevant general information
7. For side effects or similar questions, list common ones from reliable medical sources""",
    Language.NP: """तपाईं एक जानकार मेडिकल सहायक हुनुहुन्छ। यो औषधि जानकारीको आधारमा:
{initial_analysis}

कृपया यो प्रश्नको उत्तर दिनुहोस्:
{question}

महत्वपूर्ण निर्देशनहरू:
1. सधैं प्रदान गरिएको औषधि विवरणको आधारमा विशिष्ट जानकारी प्रदान गर्नुहोस्
2. यदि विश्लेषणमा जानकारी उपलब्ध छैन भने, समान औषधिहरूको बारेमा सामान्य जानकारी प्रदान गर्नुहोस्
3. स्पष्टताको लागि बुँदाहरू प्रयोग गर्नुहोस्
4. महत्वपूर्ण चेतावनी वा मुख्य बुँदाहरूलाई बोल्ड गर्नुहोस्
5. उत्तर संक्षिप्त तर जानकारीपूर्ण राख्नुहोस्
6. कहिल्यै "प्रदान गरिएको पाठमा उल्लेख छैन..." नभन्नुहोस् - बरु, सान्दर्भिक सामान्य जानकारी प्रदान गर्नुहोस्
7. साइड इफेक्ट वा यस्तै प्रश्नहरूको लागि, विश्वसनीय मेडिकल स्रोतहरूबाट सामान्य प्रभावहरू सूचीबद्ध गर्नुहोस्""",
}

ERROR_PREFIX: Dict[Language, str] = {
    Language.EN: "Error",
    Language.NP: "त्रुटि",
}

UNKNOWN_MEDICINE: Dict[Language, str] = {
    Language.EN: "Unknown Medicine",
    Language.NP: "अज्ञात औषधि",
}

ANALYSIS_FAILED: Dict[Language, str] = {
    Language.EN: "Failed to analyze medicine. Please try again.",
    Language.NP: "औषधि विश्लेषण गर्न असफल भयो। कृपया पुन: प्रयास गर्नुहोस्।",
}

CHAT_ERROR: Dict[Language, str] = {
    Language.EN: "Sorry, I encountered an error. Please try again.",
    Language.NP: "माफ गर्नुहोस्, मैले एउटा त्रुटि भेटाएँ। कृपया पुन: प्रयास गर्नुहोस्।",
}


def section_keys(language: Language) -> Tuple[str, ...]:
    """Return the section keys for `language` in report order."""
    return tuple(SECTION_PROMPTS[language])


def follow_up_prompt(language: Language, initial_analysis: str, question: str) -> str:
    """Wrap the first chat question with the analysis it refers to."""
    return FOLLOW_UP_TEMPLATES[language].format(initial_analysis=initial_analysis, question=question)


def _validate_catalog() -> None:
    reference = list(SECTION_PROMPTS[Language.EN])
    localized = (SECTION_PROMPTS, SECTION_TITLES)
    per_language = (
        INITIAL_ANALYSIS_PROMPTS,
        FOLLOW_UP_TEMPLATES,
        ERROR_PREFIX,
        UNKNOWN_MEDICINE,
        ANALYSIS_FAILED,
        CHAT_ERROR,
    )
    for language in Language:
        for table in localized:
            keys = list(table.get(language, {}))
            if keys != reference:
                raise ValueError(f"Prompt catalog for '{language.value}' defines sections {keys}, expected {reference}")
        for table in per_language:
            if not table.get(language):
                raise ValueError(f"Prompt catalog is missing a '{language.value}' entry")


_validate_catalog()
