from enum import IntEnum, unique
import math

from .rules import LATEST, get_rule_version
from .utils import clamp


@unique
class SkillKind(IntEnum):
    """Indices for the strain specific values.
    """
    speed = 0
    aim = 1


class Skill:
    """Accumulates the strain of one skill across a beatmap.

    The strain decays exponentially with time and is raised by each
    transition. The highest strain in every fixed width section of the map is
    kept as a peak, and the peaks are combined into the difficulty value.

    Parameters
    ----------
    kind : SkillKind
        Which skill to rate.
    rules : str or RuleVersion, optional
        The formulas to use.
    great_hit_window : float, optional
        The window to score a 300 in milliseconds. Only read when the rules
        scale the speed strain by the hit window.
    """
    decay_base = 0.3, 0.15
    skill_multiplier = 1400, 26.25
    decay_weight = 0.9

    almost_diameter = 90
    stream_spacing = 110
    single_spacing = 125

    min_speed_bonus = 75
    max_speed_bonus = 45
    speed_balancing_factor = 40

    aim_angle_bonus_begin = math.pi / 3
    speed_angle_bonus_begin = 5 * math.pi / 6
    aim_timing_threshold = 107

    def __init__(self, kind, rules=LATEST, great_hit_window=None):
        self.kind = SkillKind(kind)
        self.rules = get_rule_version(rules)
        self.great_hit_window = great_hit_window

        self.current_strain = 1.0
        self.current_section_peak = 1.0
        self.strain_peaks = []
        self.prev_time = None

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.kind.name},'
            f' {len(self.strain_peaks)} peaks>'
        )

    def strain_decay(self, ms):
        return self.decay_base[self.kind] ** (ms / 1000)

    def process(self, h):
        """Add a transition to the current section.

        Parameters
        ----------
        h : DifficultyHitObject
            The transition, in map order.
        """
        self.current_strain *= self.strain_decay(h.delta)
        self.current_strain += (
            self.strain_value_of(h) * self.skill_multiplier[self.kind]
        )
        self.current_section_peak = max(
            self.current_section_peak,
            self.current_strain,
        )
        self.prev_time = h.time

    def save_current_peak(self):
        """Store the peak of the current section.

        Nothing is stored before the first transition is processed.
        """
        if self.prev_time is not None:
            self.strain_peaks.append(self.current_section_peak)

    def start_new_section_from(self, time):
        """Close the current section and begin the next one at ``time``.

        Parameters
        ----------
        time : float
            The start of the new section. The new section's peak begins at
            the current strain decayed to this time.
        """
        self.save_current_peak()
        if self.prev_time is not None:
            self.current_section_peak = (
                self.current_strain *
                self.strain_decay(time - self.prev_time)
            )

    def difficulty_value(self):
        """Combine the section peaks, weighting the highest ones the most.

        Returns
        -------
        difficulty : float
            The weighted sum of the peaks. This is 0 when there are no
            peaks.
        """
        difficulty = 0.0
        weight = 1.0
        for peak in sorted(self.strain_peaks, reverse=True):
            difficulty += peak * weight
            weight *= self.decay_weight

        return difficulty

    def strain_value_of(self, h):
        """The strain added by a transition before the skill multiplier.
        """
        if h.is_spinner:
            return 0.0

        if self.rules.legacy_spacing:
            return self._legacy_strain_value_of(h)

        if self.kind == SkillKind.speed:
            return self._speed_strain_value_of(h)
        return self._aim_strain_value_of(h)

    def _legacy_strain_value_of(self, h):
        distance = h.jump_distance
        if self.rules.travel_in_spacing:
            distance += h.travel_distance

        return self._spacing_weight(distance) / h.strain_time

    def _spacing_weight(self, distance):
        if self.kind == SkillKind.speed:
            if distance > self.single_spacing:
                return 2.5
            elif distance > self.stream_spacing:
                return (
                    1.6 +
                    0.9 *
                    (distance - self.stream_spacing) /
                    (self.single_spacing - self.stream_spacing)
                )
            elif distance > self.almost_diameter:
                return (
                    1.2 +
                    0.4 *
                    (distance - self.almost_diameter) /
                    (self.stream_spacing - self.almost_diameter)
                )
            elif distance > self.almost_diameter / 2:
                return (
                    0.95 +
                    0.25 *
                    (distance - self.almost_diameter / 2) /
                    (self.almost_diameter / 2)
                )
            return 0.95

        return distance ** 0.99

    def _speed_strain_value_of(self, h):
        distance = min(
            self.single_spacing,
            h.travel_distance + h.jump_distance,
        )
        delta_time = max(self.max_speed_bonus, h.delta)

        strain_time = h.strain_time
        if self.rules.speed_hit_window and self.great_hit_window:
            strain_time /= clamp(
                (strain_time / (2 * self.great_hit_window)) / 0.93,
                0.92,
                1,
            )

        speed_bonus = 1.0
        if delta_time < self.min_speed_bonus:
            speed_bonus += (
                (self.min_speed_bonus - delta_time) /
                self.speed_balancing_factor
            ) ** 2

        angle_bonus = 1.0
        angle = h.angle
        if angle is not None and angle < self.speed_angle_bonus_begin:
            angle_bonus = 1 + math.sin(
                1.5 * (self.speed_angle_bonus_begin - angle),
            ) ** 2 / 3.57

            if angle < math.pi / 2:
                angle_bonus = 1.28
                if distance < self.almost_diameter:
                    closeness = min(
                        (self.almost_diameter - distance) / 10,
                        1,
                    )
                    if angle < math.pi / 4:
                        angle_bonus += (1 - angle_bonus) * closeness
                    else:
                        angle_bonus += (
                            (1 - angle_bonus) *
                            closeness *
                            math.sin((math.pi / 2 - angle) / (math.pi / 4))
                        )

        return (
            (1 + (speed_bonus - 1) * 0.75) *
            angle_bonus *
            (0.95 + speed_bonus * (distance / self.single_spacing) ** 3.5) /
            strain_time
        )

    def _aim_strain_value_of(self, h):
        result = 0.0

        angle = h.angle
        if (angle is not None and
                angle > self.aim_angle_bonus_begin and
                h.prev_jump_distance is not None):
            scale = 90
            angle_bonus = math.sqrt(
                max(h.prev_jump_distance - scale, 0) *
                math.sin(angle - self.aim_angle_bonus_begin) ** 2 *
                max(h.jump_distance - scale, 0),
            )
            result = (
                1.5 *
                max(0, angle_bonus) ** 0.99 /
                max(self.aim_timing_threshold, h.prev_strain_time)
            )

        jump_exp = h.jump_distance ** 0.99
        travel_exp = h.travel_distance ** 0.99
        combined = jump_exp + travel_exp + math.sqrt(travel_exp * jump_exp)

        return max(
            result + combined / max(h.strain_time, self.aim_timing_threshold),
            combined / h.strain_time,
        )
