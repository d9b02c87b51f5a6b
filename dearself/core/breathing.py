#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Guided Breathing
Breathing patterns catalog and the phase-cycling session state machine

The session cycles inhale -> hold -> exhale -> rest -> inhale, counting one
cycle each time the phase comes back to inhale. It performs no I/O and has
no notion of wall-clock time: whoever owns it calls tick() once per second
while it is running (see core/ticker.py).
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from dearself.models.enums import BreathingPhase

logger = logging.getLogger(__name__)

PHASE_ORDER: List[BreathingPhase] = [
    BreathingPhase.INHALE,
    BreathingPhase.HOLD,
    BreathingPhase.EXHALE,
    BreathingPhase.REST,
]

PHASE_INSTRUCTIONS = {
    BreathingPhase.INHALE: "Breathe In",
    BreathingPhase.HOLD: "Hold",
    BreathingPhase.EXHALE: "Breathe Out",
    BreathingPhase.REST: "Rest",
}

PHASE_COLORS = {
    BreathingPhase.INHALE: "from-pastel-pink-light to-pastel-pink",
    BreathingPhase.HOLD: "from-pastel-purple-light to-pastel-purple",
    BreathingPhase.EXHALE: "from-pastel-rose-light to-pastel-rose",
    BreathingPhase.REST: "from-pastel-lavender-light to-pastel-lavender",
}

def next_phase(phase: BreathingPhase) -> BreathingPhase:
    """Next phase in cyclic order"""
    index = PHASE_ORDER.index(phase)
    return PHASE_ORDER[(index + 1) % len(PHASE_ORDER)]

# ===== PATTERNS =====

@dataclass(frozen=True)
class BreathingPattern:
    """A named, immutable set of per-phase durations in seconds"""
    name: str
    description: str
    durations: Mapping[BreathingPhase, int]
    color: str = ""
    benefit: str = ""

    def __post_init__(self):
        durations = {phase: int(self.durations.get(phase, 0)) for phase in PHASE_ORDER}
        if any(seconds < 0 for seconds in durations.values()):
            raise ValueError(f"Pattern {self.name!r} has a negative phase duration")
        if sum(durations.values()) == 0:
            raise ValueError(f"Pattern {self.name!r} needs at least one non-empty phase")
        object.__setattr__(self, "durations", MappingProxyType(durations))

    def duration(self, phase: BreathingPhase) -> int:
        return self.durations[phase]

    @property
    def cycle_seconds(self) -> int:
        return sum(self.durations.values())

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "description": self.description,
            "pattern": {phase.value: seconds for phase, seconds in self.durations.items()},
            "color": self.color,
            "benefit": self.benefit,
        }

PATTERNS: List[BreathingPattern] = [
    BreathingPattern(
        name="4-7-8 Relaxation",
        description="Perfect for stress relief and better sleep",
        durations={
            BreathingPhase.INHALE: 4,
            BreathingPhase.HOLD: 7,
            BreathingPhase.EXHALE: 8,
            BreathingPhase.REST: 0,
        },
        color="from-pastel-lavender-light to-pastel-lavender",
        benefit="Reduces anxiety and promotes relaxation",
    ),
    BreathingPattern(
        name="Box Breathing",
        description="Used by Navy SEALs for focus and calm",
        durations={
            BreathingPhase.INHALE: 4,
            BreathingPhase.HOLD: 4,
            BreathingPhase.EXHALE: 4,
            BreathingPhase.REST: 4,
        },
        color="from-pastel-purple-light to-pastel-purple",
        benefit="Improves focus and reduces stress",
    ),
    BreathingPattern(
        name="Energizing Breath",
        description="Quick energy boost for alertness",
        durations={
            BreathingPhase.INHALE: 3,
            BreathingPhase.HOLD: 0,
            BreathingPhase.EXHALE: 3,
            BreathingPhase.REST: 0,
        },
        color="from-pastel-pink-light to-pastel-pink",
        benefit="Increases energy and mental clarity",
    ),
]

def get_pattern(name: str) -> Optional[BreathingPattern]:
    """Look up a catalog pattern by name"""
    for pattern in PATTERNS:
        if pattern.name == name:
            return pattern
    return None

# ===== SESSION =====

@dataclass
class BreathingSession:
    """
    Runtime state of one guided breathing session

    Invariants:
    - phase is always one of the four canonical phases
    - 0 <= seconds_remaining <= pattern.duration(phase)
    - cycles_completed grows by exactly one per entry into inhale

    Zero-duration phases are skipped within the tick that reaches them, so
    after any tick the current phase has a positive duration and a positive
    number of seconds remaining.
    """
    pattern: BreathingPattern = field(default_factory=lambda: PATTERNS[0])
    phase: BreathingPhase = BreathingPhase.INHALE
    seconds_remaining: int = -1
    cycles_completed: int = 0
    running: bool = False
    elapsed_seconds: int = 0

    def __post_init__(self):
        if self.seconds_remaining < 0:
            self.seconds_remaining = self.pattern.duration(self.phase)

    def select_pattern(self, pattern: BreathingPattern) -> None:
        """Replace the pattern and start over, paused"""
        self.pattern = pattern
        self.reset()
        logger.debug(f"Pattern selected: {pattern.name}")

    def toggle_running(self) -> bool:
        self.running = not self.running
        return self.running

    def reset(self) -> None:
        self.running = False
        self.phase = BreathingPhase.INHALE
        self.seconds_remaining = self.pattern.duration(BreathingPhase.INHALE)
        self.cycles_completed = 0
        self.elapsed_seconds = 0

    def tick(self) -> None:
        """Apply one elapsed second"""
        if self.seconds_remaining > 0:
            self.seconds_remaining -= 1
            self.elapsed_seconds += 1

        # Terminates: a pattern always has at least one non-empty phase
        while self.seconds_remaining == 0:
            self._advance()

    def _advance(self) -> None:
        self.phase = next_phase(self.phase)
        if self.phase is BreathingPhase.INHALE:
            self.cycles_completed += 1
        self.seconds_remaining = self.pattern.duration(self.phase)

    @property
    def instruction(self) -> str:
        return PHASE_INSTRUCTIONS[self.phase]

    @property
    def color(self) -> str:
        return PHASE_COLORS[self.phase]

    def snapshot(self) -> Dict:
        return {
            "pattern": self.pattern.name,
            "phase": self.phase.value,
            "instruction": self.instruction,
            "color": self.color,
            "seconds_remaining": self.seconds_remaining,
            "cycles_completed": self.cycles_completed,
            "running": self.running,
            "elapsed_seconds": self.elapsed_seconds,
        }
