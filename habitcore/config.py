from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Zone used as "local" when truncating timezone-aware inputs to midnight
    default_tz: str = "UTC"

    # Maintenance: blend of current-type and target-type maintenance calories
    weight_plan_maintenance_current_weight: float = 0.75  # target share is 1 - this

    # Target calorie bounds (kcal/day)
    weight_plan_min_calories: float = 1200.0
    weight_plan_max_calories: float = 5000.0

    # Below this remaining distance (kg) the plan holds maintenance
    weight_plan_maintenance_threshold_kg: float = 0.05
    # Realized delta (kcal) beyond which the regime counts as cut/bulk
    weight_plan_regime_threshold_kcal: float = 10.0

    # Daily delta clamp when losing
    weight_plan_cut_min_delta: float = 120.0
    weight_plan_cut_max_delta: float = 1100.0
    weight_plan_cut_max_ratio: float = 0.35  # of maintenance

    # Daily delta clamp when gaining
    weight_plan_bulk_min_delta: float = 80.0
    weight_plan_bulk_max_delta: float = 650.0
    weight_plan_bulk_max_ratio: float = 0.20  # of maintenance

    # Adaptive weekly rate (kg/week) when no deadline is set
    weight_plan_cut_rate_base: float = 0.25
    weight_plan_cut_rate_per_kg: float = 0.08
    weight_plan_cut_rate_progress: float = 0.05
    weight_plan_cut_rate_min: float = 0.25
    weight_plan_cut_rate_max: float = 0.9
    weight_plan_bulk_rate_base: float = 0.15
    weight_plan_bulk_rate_per_kg: float = 0.06
    weight_plan_bulk_rate_min: float = 0.1
    weight_plan_bulk_rate_max: float = 0.45

    # Protein (g per kg of current weight)
    weight_plan_protein_floor_cut: float = 1.8
    weight_plan_protein_floor: float = 1.6
    weight_plan_protein_cut: float = 2.2
    weight_plan_protein_cut_taper: float = 0.15  # subtracted at full progress
    weight_plan_protein_bulk: float = 2.0
    weight_plan_protein_maintenance: float = 1.8

    # Fat (g per kg of current weight)
    weight_plan_fat_floor: float = 0.55
    weight_plan_fat_cut: float = 0.8
    weight_plan_fat_bulk: float = 0.9
    weight_plan_fat_maintenance: float = 0.85

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
