# nextgenfit/utils/plan_prompt.py
from nextgenfit.schemas.plan import GenerationPreferences

DEFAULT_AGE = 25
DEFAULT_WEIGHT = 70
DEFAULT_GOAL = "General Fitness"
DEFAULT_TRAINING_DAYS = 3
DEFAULT_SESSION_DURATION = "60 min"
NO_CONSTRAINTS = "Keine"


def _value(source, key, default):
    if source is None:
        return default
    value = source.get(key) if isinstance(source, dict) else getattr(source, key, None)
    return default if value in (None, "") else value


def build_plan_prompt(profile, preferences: GenerationPreferences | dict | None) -> str:
    """프로필과 선호 설정으로 7일 플랜 생성 프롬프트를 만든다. 누락된 값은 기본값으로 채운다."""
    age = _value(profile, "age", DEFAULT_AGE)
    weight = _value(profile, "weight", DEFAULT_WEIGHT)
    goal = _value(profile, "goal", DEFAULT_GOAL)
    gender = _value(profile, "gender", "keine Angabe")
    height = _value(profile, "height", None)
    imperial = _value(profile, "units", "metric") == "imperial"

    training_days = int(_value(preferences, "training_days", DEFAULT_TRAINING_DAYS))
    training_days = min(max(training_days, 1), 7)
    rest_days = 7 - training_days
    duration = _value(preferences, "session_duration", DEFAULT_SESSION_DURATION)
    constraints = str(_value(preferences, "extra_constraints", "")).strip() or NO_CONSTRAINTS

    height_line = f"\n- Größe: {height} {'in' if imperial else 'cm'}" if height is not None else ""

    return f"""
Du bist ein professioneller Fitness-Coach. Erstelle einen personalisierten Trainingsplan für eine Woche (7 Tage).

Nutzerdaten:
- Alter: {age}
- Geschlecht: {gender}
- Gewicht: {weight} {'lbs' if imperial else 'kg'}{height_line}
- Ziel: {goal}

Vorgaben:
- Trainingstage pro Woche: {training_days}
- Ruhetage bzw. Active Recovery: {rest_days}
- Dauer pro Einheit: {duration}
- Zusätzliche Einschränkungen: {constraints}

Anweisungen:
1. Gib GENAU 7 Tagesobjekte zurück, einen pro Tag, in Wochenreihenfolge.
2. Genau {training_days} Tage sind Trainingstage und {rest_days} Tage sind Ruhetage oder Active Recovery. Verteile sie sinnvoll über die Woche.
3. Nenne in "desc" KEINE Wochentage (z.B. nicht "Montag").
4. Ruhetage haben eine leere "exercises"-Liste.
5. Ausgabe MUSS ein valides JSON-Array sein. KEIN Markdown, KEINE Code-Blöcke, KEIN Text davor oder danach.

JSON Struktur:
[
  {{
    "title": "Kurzer Titel (z.B. Push Day oder Active Recovery)",
    "desc": "Kurze Beschreibung des Fokus (max 2 Sätze).",
    "exercises": [
      {{ "name": "Übungsname", "sets": "3", "reps": "8-12", "notes": "Optionaler Hinweis" }}
    ]
  }}
]

Antworte nur mit dem JSON.
""".strip()
