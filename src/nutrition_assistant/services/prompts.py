"""Prompt construction for plan generation, modification and chat.

Every builder is a pure function of its inputs and returns the ordered chat
messages to send to the completion service. Missing optional values render as
an explicit ``None`` so prompts stay stable.
"""

import json

from nutrition_assistant.domain.meal_plan import DayPlan, MealPlan
from nutrition_assistant.domain.nutrition import NutritionalNeeds
from nutrition_assistant.domain.profile import Medication, PersonProfile, WeeklyReport
from nutrition_assistant.services.completion import ChatMessage
from nutrition_assistant.services.nutrition import (
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
)

WEEK_DAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
RECENT_REPORT_COUNT = 4
NONE_TOKEN = "None"

MEAL_PLAN_SHAPE = """{
  "week": [
    {
      "day": "Sunday",
      "meals": [
        {
          "mealType": "Breakfast",
          "meal": "Meal name",
          "recipe": "Recipe instructions",
          "ingredients": ["ingredient 1", "ingredient 2", "ingredient 3"],
          "nutritionalInfo": {
            "calories": "Calories",
            "protein": "Protein",
            "carbs": "Carbohydrates",
            "fat": "Fat",
            "fiber": "Fiber"
          },
          "servingSize": "Serving Size",
          "mealTime": "Meal Time"
        }
      ]
    }
  ]
}"""

DOCUMENT_SECTIONS = (
    "Key health indicators",
    "Test results and their meanings",
    "Any concerning values",
    "Recommended actions",
    "Follow-up suggestions",
)

GENERAL_CHAT_SYSTEM = (
    "You are a helpful nutrition assistant. Provide clear, specific answers "
    "based on the user's profile and meal plan."
)
DOCUMENT_ANALYSIS_REQUEST = (
    "Please analyze this medical document and provide a clear, structured report."
)


def build_initial_plan_messages(
    profile: PersonProfile, needs: NutritionalNeeds
) -> list[ChatMessage]:
    """Build the request for a full Sunday-to-Saturday meal plan."""
    prompt = "\n".join(
        [
            "You are a professional nutrition guide who creates meal plans "
            "for elders.",
            "",
            _targets_block(needs, with_kcal=True),
            "",
            "MEDICATIONS:",
            _medications_block(profile.medications),
            "",
            "Generate a full weekly meal plan (Sunday to Saturday) based on the "
            "following user details:",
            "",
            _profile_block(profile),
            "",
            "Additional requirements:",
            "- Plan exactly seven days in this order: " + ", ".join(WEEK_DAYS) + ".",
            "- Consider medication timings and requirements (with/without food).",
            "- Schedule meals around medication timings; never place a meal where "
            "a medication must be taken without food.",
            "- Ensure appropriate gaps between medications and meals when "
            "required.",
            "- Avoid food interactions with medications.",
            "- Include nutrients that support medication absorption when needed.",
            "- Follow every dietary restriction and exclude every allergen.",
            "- Prefer the listed cuisines.",
            "- Match the calorie, macro and meal distribution targets above.",
            "",
            "Return only JSON output, without any additional text. "
            "The JSON structure should be:",
            "",
            MEAL_PLAN_SHAPE,
        ]
    )
    return [ChatMessage(role="user", content=prompt)]


def build_modification_messages(
    profile: PersonProfile, needs: NutritionalNeeds, request_text: str
) -> list[ChatMessage]:
    """Build the request for targeted changes to the current plan."""
    goals = {
        "bmr": needs.bmr,
        "tdee": needs.tdee,
        "targetCalories": needs.target_calories,
        "macroTargets": {
            "protein": needs.macro_targets.protein,
            "carbs": needs.macro_targets.carbs,
            "fats": needs.macro_targets.fats,
            "fiber": needs.macro_targets.fiber,
        },
    }
    shape = {
        "modifications": {
            "reasoning": "Explanation based on health data",
            "focusAreas": ["area1", "area2"],
            "nutritionalGoals": goals,
            "changes": [
                {
                    "day": "Day name",
                    "mealType": "Meal type",
                    "currentMeal": "Current meal name",
                    "newMeal": {
                        "meal": "New meal name",
                        "recipe": "Recipe instructions",
                        "ingredients": ["ingredient1", "ingredient2"],
                        "nutritionalInfo": {
                            "calories": "xxx kcal",
                            "protein": "xx g",
                            "carbs": "xx g",
                            "fat": "xx g",
                            "fiber": "xx g",
                        },
                        "servingSize": "serving size",
                        "mealTime": "suggested time",
                    },
                }
            ],
        }
    }
    prompt = "\n".join(
        [
            f"{profile.name or 'User'}, you are a nutrition expert specializing "
            "in elderly care.",
            "",
            _targets_block(needs, with_kcal=False),
            "",
            "MODIFICATION REQUEST:",
            request_text,
            "",
            "CURRENT USER CONTEXT:",
            json.dumps(profile_context(profile), indent=2),
            "",
            "Generate meal modifications that:",
            "1. Match the calculated nutritional needs",
            "2. Follow all dietary restrictions",
            "3. Consider health conditions and medication timing",
            "4. Maintain nutritional balance",
            "5. Use preferred cuisines",
            "6. Are easy to prepare",
            "",
            "Return ONLY JSON in this format:",
            json.dumps(shape, indent=2),
        ]
    )
    return [
        ChatMessage(role="system", content=prompt),
        ChatMessage(role="user", content=request_text),
    ]


def build_document_analysis_messages(
    extracted_text: str, profile: PersonProfile | None = None
) -> list[ChatMessage]:
    """Build the request for analyzing text extracted from a medical document."""
    subject = f" for {profile.name}" if profile and profile.name else ""
    lines = [
        f"You are a medical document analyzer. Analyze this medical "
        f"document{subject}.",
    ]
    if profile is not None:
        lines.extend(
            [
                f"Patient Age: {_number(profile.age)}",
                f"Health Context: {_text(profile.health_issues)}",
                f"Allergies: {_text(profile.allergies)}",
            ]
        )
    lines.extend(["", "Please analyze and provide insights about:"])
    lines.extend(
        f"{position}. {section}"
        for position, section in enumerate(DOCUMENT_SECTIONS, start=1)
    )
    lines.extend(["", f"Document text: {extracted_text or 'No text extracted.'}"])
    return [
        ChatMessage(role="system", content="\n".join(lines)),
        ChatMessage(role="user", content=DOCUMENT_ANALYSIS_REQUEST),
    ]


def build_general_chat_messages(
    profile: PersonProfile, message: str, weekday: str
) -> list[ChatMessage]:
    """Build a context-grounded answer request for a free-form question."""
    context = "\n".join(
        [
            "User Profile:",
            f"- Name: {profile.name or 'User'}",
            f"- Age: {_number(profile.age)}",
            f"- Health Issues: {_text(profile.health_issues)}",
            f"- Allergies: {_text(profile.allergies)}",
            f"- Diet Restrictions: {_text(profile.dietary_restrictions)}",
            "",
            "Today's Meals:",
            todays_meals(profile.meal_plan, weekday),
            "",
            "Recent Health Updates:",
            format_weekly_reports(profile.weekly_reports),
        ]
    )
    return [
        ChatMessage(role="system", content=GENERAL_CHAT_SYSTEM),
        ChatMessage(role="user", content=f"Context:\n{context}\n\nQuestion: {message}"),
    ]


def todays_meals(meal_plan: MealPlan | None, weekday: str) -> str:
    """Render the stored plan's meals for a weekday."""
    if meal_plan is None or not meal_plan.week:
        return "No meal plan available."
    day_plan = meal_plan.day(weekday)
    if day_plan is None:
        return f"No meal plan found for today ({weekday})."
    return format_day_plan(day_plan)


def format_day_plan(day_plan: DayPlan) -> str:
    """Render one day of a meal plan as plain text."""
    lines = [f"{day_plan.day}:"]
    for meal in day_plan.meals:
        info = meal.nutritional_info
        lines.extend(
            [
                f"- {meal.meal_type}: {meal.meal} at {meal.meal_time}",
                f"  Recipe: {meal.recipe}",
                f"  Ingredients: {', '.join(meal.ingredients)}",
                f"  Nutrition: {info.calories} kcal, Protein: {info.protein}, "
                f"Carbs: {info.carbs}, Fat: {info.fat}, Fiber: {info.fiber}",
                f"  Serving Size: {meal.serving_size}",
            ]
        )
    return "\n".join(lines)


def format_weekly_reports(reports: tuple[WeeklyReport, ...]) -> str:
    """Summarize the most recent weekly well-being reports."""
    if not reports:
        return "No weekly reports available."
    blocks = []
    for report in reports[-RECENT_REPORT_COUNT:]:
        blocks.append(
            "\n".join(
                [
                    f"Report Date: {report.date.isoformat()}",
                    f"  Overall Feeling: {report.overall_feeling}/5",
                    f"  Energy Levels: {report.energy_levels}/5",
                    f"  Sleep Quality: {report.sleep_quality}/5",
                    f"  Stress Levels: {report.stress_levels}/5",
                    f"  Diet Adherence: {report.diet_adherence}/5",
                    f"  Physical Activity: {report.physical_activity}/5",
                    f"  Digestive Health: {report.digestive_health}/5",
                    f"  Challenges: {report.challenges or 'None reported'}",
                    f"  Improvements: {report.improvements or 'None reported'}",
                    f"  Notes: {report.notes or 'No additional notes'}",
                ]
            )
        )
    return "\n\n".join(blocks)


def profile_context(profile: PersonProfile) -> dict[str, object]:
    """Return the profile as a JSON-ready mapping for prompt context."""
    return {
        "name": profile.name,
        "age": profile.age,
        "weight": profile.weight,
        "height": profile.height,
        "gender": profile.gender,
        "healthIssues": profile.health_issues,
        "allergies": profile.allergies,
        "cuisines": profile.cuisines,
        "goal": profile.goal,
        "activityLevel": profile.activity_level,
        "dietaryRestrictions": profile.dietary_restrictions,
        "mealPreferences": profile.meal_preferences,
        "medications": [
            {
                "name": medication.name,
                "timing": medication.timing,
                "dosage": medication.dosage,
                "withFood": medication.with_food,
            }
            for medication in profile.medications
        ],
        "mealPlan": (
            profile.meal_plan.model_dump(by_alias=True) if profile.meal_plan else None
        ),
    }


def _targets_block(needs: NutritionalNeeds, *, with_kcal: bool) -> str:
    macros = needs.macro_targets
    distribution = needs.meal_distribution
    if with_kcal:
        macro_lines = [
            f"Protein: {macros.protein}g ({macros.protein * KCAL_PER_G_PROTEIN} kcal)",
            f"Carbs: {macros.carbs}g ({macros.carbs * KCAL_PER_G_CARBS} kcal)",
            f"Fats: {macros.fats}g ({macros.fats * KCAL_PER_G_FAT} kcal)",
        ]
    else:
        macro_lines = [
            f"Protein: {macros.protein}g",
            f"Carbs: {macros.carbs}g",
            f"Fats: {macros.fats}g",
        ]
    return "\n".join(
        [
            "CALCULATED NUTRITIONAL NEEDS:",
            f"BMR: {needs.bmr} kcal/day",
            f"TDEE: {needs.tdee} kcal/day",
            f"Daily Target Calories: {needs.target_calories} kcal",
            "",
            "MACRO TARGETS:",
            *macro_lines,
            f"Fiber: {macros.fiber}g",
            "",
            "MEAL DISTRIBUTION:",
            f"Breakfast: {distribution.breakfast} kcal",
            f"Lunch: {distribution.lunch} kcal",
            f"Snacks: {distribution.snacks} kcal",
            f"Dinner: {distribution.dinner} kcal",
        ]
    )


def _medications_block(medications: tuple[Medication, ...]) -> str:
    if not medications:
        return "No medications listed"
    return "\n".join(
        f"- {medication.name} ({medication.dosage}) - Take {medication.timing}"
        + (" with food" if medication.with_food else " without food requirement")
        for medication in medications
    )


def _profile_block(profile: PersonProfile) -> str:
    return "\n".join(
        [
            f"Age: {_number(profile.age)}",
            f"Weight: {_number(profile.weight)} kg",
            f"Height: {_number(profile.height)} cm",
            f"Gender: {profile.gender}",
            f"Health Issues: {_text(profile.health_issues)}",
            f"Allergies: {_text(profile.allergies)}",
            f"Meal Preferences: {_text(profile.meal_preferences)}",
            f"Dietary Restrictions: {_text(profile.dietary_restrictions)}",
            f"Goal: {_text(profile.goal)}",
            f"Activity Level: {_text(profile.activity_level)}",
            f"Cuisine Preferences: {_text(profile.cuisines)}",
        ]
    )


def _text(value: str | None) -> str:
    if value is None or not value.strip():
        return NONE_TOKEN
    return value


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
