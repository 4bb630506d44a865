"""Tests for meal plan generation."""

import asyncio
from dataclasses import replace

import pytest

from nutrition_assistant.domain.errors import (
    CompletionError,
    GenerationFailed,
    InvalidMedication,
    InvalidProfile,
    MalformedModelOutput,
    SchemaViolation,
)
from nutrition_assistant.domain.profile import Medication, PersonProfile, ProfileUpdate
from nutrition_assistant.services.meal_plans import (
    MealPlanService,
    apply_profile_update,
    validate_medications,
)
from tests.conftest import (
    FIXED_NOW,
    FakeCompletionClient,
    as_model_output,
    sample_plan,
)


def _service(client: FakeCompletionClient) -> MealPlanService:
    return MealPlanService(client=client, model="test-model", clock=lambda: FIXED_NOW)


def test_generate_initial_plan_returns_plan_and_stamped_needs(
    profile: PersonProfile,
) -> None:
    client = FakeCompletionClient(responses=[as_model_output(sample_plan())])

    generated = asyncio.run(_service(client).generate_initial_plan(profile))

    assert len(generated.meal_plan.week) == 7
    assert generated.nutritional_needs.target_calories == 1901
    assert generated.nutritional_needs.last_calculated == FIXED_NOW
    assert len(client.calls) == 1
    assert client.calls[0]["model"] == "test-model"
    prompt = client.calls[0]["messages"][0].content
    assert "Daily Target Calories: 1901 kcal" in prompt


@pytest.mark.parametrize(
    ("client", "cause"),
    [
        (FakeCompletionClient(error=CompletionError("rate limited")), CompletionError),
        (FakeCompletionClient(responses=["I cannot help"]), MalformedModelOutput),
        (FakeCompletionClient(responses=['{"days": []}']), SchemaViolation),
    ],
)
def test_generation_failures_are_wrapped(
    profile: PersonProfile, client: FakeCompletionClient, cause: type[Exception]
) -> None:
    with pytest.raises(GenerationFailed) as excinfo:
        asyncio.run(_service(client).generate_initial_plan(profile))

    assert isinstance(excinfo.value.__cause__, cause)
    assert len(client.calls) == 1


def test_invalid_profile_fails_before_completion_call(profile: PersonProfile) -> None:
    client = FakeCompletionClient(responses=[as_model_output(sample_plan())])

    with pytest.raises(InvalidProfile):
        asyncio.run(_service(client).generate_initial_plan(replace(profile, weight=0)))

    assert client.calls == []


def test_regenerate_plan_folds_changes_into_prompt(profile: PersonProfile) -> None:
    client = FakeCompletionClient(responses=[as_model_output(sample_plan())])
    changes = ProfileUpdate(
        goal="weight gain",
        allergies="shellfish",
        medications=(Medication(name="Lisinopril", timing="9 PM", dosage="10mg"),),
    )

    generated = asyncio.run(_service(client).regenerate_plan(profile, changes))

    prompt = client.calls[0]["messages"][0].content
    assert "Allergies: shellfish" in prompt
    assert "Lisinopril (10mg)" in prompt
    assert "Metformin" not in prompt
    needs = generated.nutritional_needs
    assert needs.target_calories > needs.tdee


def test_regenerate_plan_rejects_bad_medication_without_calling_model(
    profile: PersonProfile,
) -> None:
    client = FakeCompletionClient(responses=[as_model_output(sample_plan())])
    changes = ProfileUpdate(
        medications=(
            Medication(name="A", timing="AM", dosage="5mg"),
            Medication(name="", timing="PM", dosage="1mg"),
        )
    )

    with pytest.raises(InvalidMedication) as excinfo:
        asyncio.run(_service(client).regenerate_plan(profile, changes))

    assert excinfo.value.index == 1
    assert excinfo.value.fields == ["name"]
    assert client.calls == []


def test_validate_medications_reports_all_missing_fields() -> None:
    with pytest.raises(InvalidMedication) as excinfo:
        validate_medications([Medication(name="X", timing=" ", dosage="")])

    assert excinfo.value.index == 0
    assert excinfo.value.fields == ["timing", "dosage"]
    assert "index 0" in str(excinfo.value)


def test_validate_medications_accepts_complete_batch() -> None:
    batch = [
        Medication(name="A", timing="AM", dosage="5mg"),
        Medication(name="B", timing="PM", dosage="1mg", with_food=True),
    ]

    assert validate_medications(batch) == tuple(batch)


def test_apply_profile_update_keeps_unset_fields(profile: PersonProfile) -> None:
    updated = apply_profile_update(profile, ProfileUpdate(weight=72.5))

    assert updated.weight == 72.5
    assert updated.allergies == profile.allergies
    assert updated.medications == profile.medications
    assert profile.weight == 70
