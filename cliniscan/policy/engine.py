from cliniscan.core.policy import ImportPolicyDecision
from cliniscan.core.result import FormatAnalysisOutcome, ImportStrategy
from cliniscan.policy.rules import determine_strategy, estimate_import_time


class ImportPolicyEngine:
    """
    Turns raw counts into the import recommendation.

    The default strategy depends on the patient count alone;
    multi-visit / multi-patient modes are only offered as alternatives.
    """

    def evaluate(self, outcome: FormatAnalysisOutcome) -> ImportPolicyDecision:
        reasons = []

        strategy = determine_strategy(outcome.patients_count)
        reasons.append(f"patients_{outcome.patients_count}_{strategy.value}")

        estimated = estimate_import_time(
            outcome.patients_count,
            outcome.visits_count,
            outcome.observations_count,
        )

        has_multiple_patients = outcome.patients_count > 1
        has_multiple_visits = outcome.visits_count > 1

        alternatives = []
        if has_multiple_visits:
            alternatives.append(ImportStrategy.MULTIPLE_VISITS)
            reasons.append("multiple_visits_detected")
        if has_multiple_patients:
            alternatives.append(ImportStrategy.MULTIPLE_PATIENTS)
            reasons.append("multiple_patients_detected")

        return ImportPolicyDecision(
            strategy=strategy,
            estimated_import_time=estimated,
            alternatives=alternatives,
            reasons=reasons,
            has_multiple_patients=has_multiple_patients,
            has_multiple_visits=has_multiple_visits,
        )
