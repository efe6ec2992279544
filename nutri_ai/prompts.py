"""Prompts for the vision model."""

AI_PROMPT = (
    "Analyze the meal in the image. Respond ONLY with a valid JSON object. "
    "Do not include markdown or text outside the JSON. The structure must be: "
    '{"items": [{"item": "string", "calories": number}], '
    '"nutrition_summary": {"total_calories": number, '
    '"macronutrients": {"protein_g": number, "carbs_g": number, "fat_g": number, "fiber_g": number}, '
    '"micronutrients": {"sugar_g": number, "sodium_mg": number}}, '
    '"general_summary": "string", '
    '"confidence_score": "string (High, Medium, or Low)", '
    '"health_tips": "string"}'
)
