"""
Regime builders.

Each builder returns a Regime for a named training/sleep pattern. Session
schedules are (start_hour, duration_hours, amplitude) triples; naps are
(start_hour, duration_hours) pairs. Defaults reproduce the scenarios used
in the readiness figures.
"""
from typing import Callable, Dict, Tuple

from readiness_engine.inputs.regime import Regime
from readiness_engine.inputs.signals import (
    AlternatingDays,
    Constant,
    DailyPulses,
    NO_SESSIONS,
    Nap,
    SleepSchedule,
    WeeklyTaper,
)


MODALITIES = ("e", "h", "s")


def _regime(name, u_e, u_h, u_s, nutrition, context, bedtime_hour, sleep_hours,
            naps: Tuple[Nap, ...] = (), description: str = "") -> Regime:
    return Regime(
        name=name, u_e=u_e, u_h=u_h, u_s=u_s,
        sleep=SleepSchedule(bedtime_hour, sleep_hours, tuple(naps)),
        nutrition=Constant(nutrition), context=Constant(context),
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours, naps=tuple(naps),
        description=description,
    )


# ══════════════════════════════════════════════════════════════════
# DAILY-PERIODIC REGIMES
# ══════════════════════════════════════════════════════════════════

def early_hiit(amp_h: float = 1.0, amp_e: float = 0.2,
               bedtime_hour: float = 23.0, sleep_hours: float = 8.0) -> Regime:
    """07:00 HIIT + short 09:00 endurance; low B(t), no naps."""
    return _regime(
        "Early-AM HIIT",
        u_e=DailyPulses(((9.0, 0.5, amp_e),)),
        u_h=DailyPulses(((7.0, 1.0, amp_h),)),
        u_s=NO_SESSIONS,
        nutrition=0.8, context=0.1,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours,
        description="Short HIIT in the morning + small E, low B(t), no naps.",
    )


def evening_intensity(amp_e: float = 0.6, amp_h: float = 0.6,
                      bedtime_hour: float = 23.0, sleep_hours: float = 8.0) -> Regime:
    """Endurance 19:00 then HIIT 20:00; large B(t) at lights out."""
    return _regime(
        "Evening intensity",
        u_e=DailyPulses(((19.0, 1.0, amp_e),)),
        u_h=DailyPulses(((20.0, 1.0, amp_h),)),
        u_s=NO_SESSIONS,
        nutrition=0.8, context=0.1,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours,
        description="E+H in the evening → large B(t), reduced q(B) that night.",
    )


def split_day(amp_e: float = 0.3, amp_s: float = 0.8,
              bedtime_hour: float = 23.0, sleep_hours: float = 8.0) -> Regime:
    """Light AM endurance + PM strength."""
    return _regime(
        "Split day (AM E + PM S)",
        u_e=DailyPulses(((9.0, 0.75, amp_e),)),
        u_h=NO_SESSIONS,
        u_s=DailyPulses(((18.0, 1.0, amp_s),)),
        nutrition=0.85, context=0.1,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours,
        description="AM endurance + PM strength (some B penalty).",
    )


def midday_polarized(amp_e: float = 0.8, amp_h: float = 0.2,
                     bedtime_hour: float = 23.0, sleep_hours: float = 8.0) -> Regime:
    """Large midday endurance block with a tiny HIIT primer."""
    return _regime(
        "Midday polarized endurance",
        u_e=DailyPulses(((13.0, 1.5, amp_e),)),
        u_h=DailyPulses(((12.0, 0.5, amp_h),)),
        u_s=NO_SESSIONS,
        nutrition=0.8, context=0.1,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours,
        description="High E + tiny H placed far from bedtime, keeping B small.",
    )


def polarized(amp_e: float = 0.9, amp_h: float = 0.2,
              bedtime_hour: float = 23.0, sleep_hours: float = 8.0) -> Regime:
    return _regime(
        "Polarized (high E, little H, midday)",
        u_e=DailyPulses(((12.5, 1.5, amp_e),)),
        u_h=DailyPulses(((11.0, 0.5, amp_h),)),
        u_s=NO_SESSIONS,
        nutrition=0.8, context=0.08,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours,
        description="High E, small H, both midday → small B.",
    )


def sleep_extension(amp_e: float = 0.5, bedtime_hour: float = 22.5, sleep_hours: float = 9.0,
                    nap: Nap = (13.0, 0.5)) -> Regime:
    return _regime(
        "Sleep extension + nap",
        u_e=DailyPulses(((13.0, 1.0, amp_e),)),
        u_h=NO_SESSIONS,
        u_s=NO_SESSIONS,
        nutrition=0.9, context=0.05,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours, naps=(nap,),
        description="Longer nightly sleep + short nap; moderate midday E.",
    )


# ══════════════════════════════════════════════════════════════════
# MULTI-DAY PATTERNS (approximately periodic)
# ══════════════════════════════════════════════════════════════════

def alternating_hard_easy(amp_e: float = 0.6, amp_h: float = 0.6, amp_s: float = 0.6,
                          nap: Nap = (13.0, 0.5),
                          bedtime_hour: float = 23.0, sleep_hours: float = 8.0) -> Regime:
    """Hard (even) days with E+H+S; easy (odd) days a 10% endurance touch + nap."""
    return _regime(
        "Alternating hard/easy",
        u_e=AlternatingDays(DailyPulses(((10.0, 1.0, amp_e),)),
                            DailyPulses(((10.0, 0.3, 0.1 * amp_e),))),
        u_h=AlternatingDays(DailyPulses(((17.0, 1.0, amp_h),)), NO_SESSIONS),
        u_s=AlternatingDays(DailyPulses(((18.0, 0.75, amp_s),)), NO_SESSIONS),
        nutrition=0.85, context=0.1,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours, naps=(nap,),
        description="Hard days with E+H+S, easy days minimal + 30min nap.",
    )


def taper(base_amp_e: float = 0.6, base_amp_h: float = 0.6, weekly_ratio: float = 0.6,
          bedtime_hour: float = 22.0, sleep_hours: float = 8.5) -> Regime:
    """Volume decays by ``weekly_ratio`` per week; intensity mostly kept; early sessions."""
    return _regime(
        "Taper (vol down, intensity kept, early sessions)",
        u_e=WeeklyTaper(DailyPulses(((9.0, 1.0, base_amp_e),)), weekly_ratio),
        u_h=WeeklyTaper(DailyPulses(((10.0, 0.75, base_amp_h),)), weekly_ratio,
                        floor=0.4, weight=0.6),
        u_s=NO_SESSIONS,
        nutrition=0.9, context=0.05,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours,
        description="Exponential volume reduction, intensity maintained, sessions early.",
    )


# ══════════════════════════════════════════════════════════════════
# CONTROLLED EXPERIMENTS
# ══════════════════════════════════════════════════════════════════

def single_session(modality: str = "h", start_hour: float = 7.0, duration_hours: float = 1.0,
                   amplitude: float = 1.0, nutrition: float = 0.8, context: float = 0.1,
                   bedtime_hour: float = 23.0, sleep_hours: float = 8.0,
                   naps: Tuple[Nap, ...] = ()) -> Regime:
    """One daily session on a single modality ('e', 'h' or 's'), nothing else."""
    if modality not in MODALITIES:
        raise ValueError(f"Unknown modality {modality!r}; expected one of {MODALITIES}")
    pulse = DailyPulses(((start_hour, duration_hours, amplitude),))
    drives = {m: (pulse if m == modality else NO_SESSIONS) for m in MODALITIES}
    return _regime(
        f"Single {modality.upper()} session {start_hour:05.2f}h",
        u_e=drives["e"], u_h=drives["h"], u_s=drives["s"],
        nutrition=nutrition, context=context,
        bedtime_hour=bedtime_hour, sleep_hours=sleep_hours, naps=naps,
        description="One daily pulse on a single modality.",
    )


def full_rest(nutrition: float = 0.8, context: float = 0.0) -> Regime:
    """No training and permanent sleep: fatigue and sleep debt decay to zero."""
    return _regime(
        "Full rest (always asleep)",
        u_e=NO_SESSIONS, u_h=NO_SESSIONS, u_s=NO_SESSIONS,
        nutrition=nutrition, context=context,
        bedtime_hour=0.0, sleep_hours=24.0,
        description="Zero training drive, sleep indicator constantly 1.",
    )


REGIMES: Dict[str, Callable[..., Regime]] = {
    "early_hiit": early_hiit,
    "evening_intensity": evening_intensity,
    "split_day": split_day,
    "alternating_hard_easy": alternating_hard_easy,
    "midday_polarized": midday_polarized,
    "taper": taper,
    "sleep_extension": sleep_extension,
    "polarized": polarized,
}


def get_regime(key: str, **kwargs) -> Regime:
    """Build a regime by registry key, forwarding keyword overrides."""
    builder = REGIMES.get(key.lower())
    if builder is None:
        raise ValueError(f"Unknown regime {key!r}; known: {', '.join(REGIMES)}")
    return builder(**kwargs)
