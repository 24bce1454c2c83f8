"""
Numeric Settings — параметры точности и кэшей

Immutable Pydantic модель со всеми численными параметрами движка:
рабочая точность, точность результата, параметры сходимости exp/ln,
пороги кэшей и ограничения на показатели степени.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. output_precision < newton_precision < working_precision
   (запас рабочей точности поглощает шум цепочек приближений)
2. exp_max_order нечётный (ряд Тейлора суммируется парами членов)
3. Настройки читаются один раз при импорте и далее не меняются
"""

from pydantic import BaseModel, Field, model_validator


class NumericSettings(BaseModel):
    """
    Параметры высокоточного десятичного движка и кэшей Rat.

    Immutable модель (frozen=True).
    """

    # Точность (значащие цифры)
    working_precision: int = Field(
        110, gt=0, description="Точность промежуточных операций (значащие цифры)"
    )
    output_precision: int = Field(
        100, gt=0, description="Точность итогового результата после finalize"
    )
    newton_precision: int = Field(
        106, gt=0, description="Округление очередного приближения Ньютона в ln"
    )

    # Сходимость exp/ln
    exp_division: int = Field(
        1000, gt=1, description="Делитель дробной части аргумента exp"
    )
    exp_max_order: int = Field(51, gt=0, description="Максимальный порядок ряда Тейлора")
    ln_max_iterations: int = Field(100, gt=0, description="Лимит итераций Ньютона")

    # Кэши
    max_cached_ln: int = Field(100, ge=2, description="Верхняя граница кэша ln(int)")
    max_cached_sqrt: int = Field(100, ge=0, description="Верхняя граница кэша sqrt(int)")
    max_cached_prime_factors: int = Field(
        100, ge=2, description="Верхняя граница кэша разложений на простые"
    )
    max_cached_whole: int = Field(1000, ge=0, description="Кэш целых Rat: |n| <= bound")
    max_cached_fraction: int = Field(
        100, ge=1, description="Кэш дробных Rat: |n| <= bound, 1 <= d <= bound"
    )

    # Ограничения величины
    max_safe_power: int = Field(
        10**8, gt=1, description="Предел прямого возведения в целую степень"
    )
    max_int_to_factor: int = Field(
        10**9, gt=1, description="Порог факторизации для точного log"
    )
    max_exact_bits: int = Field(
        10**7, gt=0, description="Предел размера точной целой степени (биты)"
    )

    model_config = {"frozen": True}  # Immutable

    @model_validator(mode="after")
    def validate_precision_order(self) -> "NumericSettings":
        """Рабочая точность должна превышать точность Ньютона и результата"""
        if not self.output_precision < self.newton_precision < self.working_precision:
            raise ValueError(
                "precision must satisfy output < newton < working, got "
                f"{self.output_precision}/{self.newton_precision}/{self.working_precision}"
            )
        if self.exp_max_order % 2 == 0:
            raise ValueError(f"exp_max_order must be odd, got {self.exp_max_order}")
        return self

    @property
    def max_safe_power_squared(self) -> int:
        """Абсолютный предел показателя степени (LIMIT^2)"""
        return self.max_safe_power * self.max_safe_power


SETTINGS: NumericSettings = NumericSettings()
