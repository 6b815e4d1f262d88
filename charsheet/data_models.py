"""
Shared data structures for the character sheet core.

These structures are exchanged between the stat resolver, the dice engine
and their callers (UI layer, persistence collaborator). Records loaded from
storage arrive as plain mappings; the ``from_dict`` constructors here are the
single place where such mappings are coerced into well-formed values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar
import logging
import math

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


# =============================================================================
# ENUMS
# =============================================================================


class Ability(str, Enum):
    """The six core ability scores."""
    STR = "STR"
    DEX = "DEX"
    CON = "CON"
    INT = "INT"
    WIS = "WIS"
    CHA = "CHA"


# Canonical ordering used for stat blocks and serialization
ABILITY_KEYS: tuple[str, ...] = tuple(a.value for a in Ability)


class ProficiencyLevel(str, Enum):
    """Skill proficiency tiers."""
    NONE = "none"
    PROFICIENT = "proficient"
    EXPERTISE = "expertise"

    @property
    def multiplier(self) -> int:
        """How many times the proficiency bonus applies."""
        return {
            ProficiencyLevel.NONE: 0,
            ProficiencyLevel.PROFICIENT: 1,
            ProficiencyLevel.EXPERTISE: 2,
        }[self]


class ItemType(str, Enum):
    """Inventory item categories."""
    WEAPON = "Weapon"
    ARMOR = "Armor"
    GEAR = "Gear"
    CONSUMABLE = "Consumable"


class CarryLoad(str, Enum):
    """Carried load bands shown on the inventory panel."""
    LIGHT = "Light"
    MEDIUM = "Medium"
    HEAVY = "Heavy"


class FeatureSource(str, Enum):
    """Where a feature or trait comes from."""
    RACE = "Race"
    CLASS = "Class"
    BACKGROUND = "Background"
    FEAT = "Feat"


class RollMode(str, Enum):
    """How a single d20 term is rolled."""
    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"

    @classmethod
    def coerce(cls, value: Any) -> "RollMode":
        """
        Resolve a mode from an enum member, its value or a short alias.

        Raises:
            ValueError: If the value names no known mode
        """
        if isinstance(value, RollMode):
            return value
        if value is None:
            return cls.NORMAL
        key = str(value).strip().lower()
        aliases = {
            "": cls.NORMAL,
            "n": cls.NORMAL,
            "normal": cls.NORMAL,
            "a": cls.ADVANTAGE,
            "adv": cls.ADVANTAGE,
            "advantage": cls.ADVANTAGE,
            "d": cls.DISADVANTAGE,
            "dis": cls.DISADVANTAGE,
            "disadvantage": cls.DISADVANTAGE,
        }
        if key not in aliases:
            raise ValueError(f"Unknown roll mode: {value!r}")
        return aliases[key]


class TermKind(str, Enum):
    """Kinds of parsed dice expression terms."""
    DICE = "dice"
    MODIFIER = "modifier"


# =============================================================================
# RULE FORMULAS
# =============================================================================


def ability_modifier(score: int) -> int:
    """5e ability modifier: floor((score - 10) / 2)."""
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """Proficiency bonus: +2 at levels 1-4, +3 at 5-8 and so on."""
    return math.ceil(max(1, level) / 4) + 1


def format_modifier(value: int) -> str:
    """Render a modifier with an explicit sign ("+3", "-1", "+0")."""
    return f"+{value}" if value >= 0 else str(value)


# =============================================================================
# COERCION HELPERS
# =============================================================================


def coerce_int(
    value: Any,
    default: int,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """
    Convert loosely typed input to an int, falling back to a default.

    Accepts ints, finite floats and numeric strings. Booleans, None and
    anything unparseable yield the default. The result is clamped to
    [minimum, maximum] when bounds are given.
    """
    result = default
    if isinstance(value, bool) or value is None:
        result = default
    elif isinstance(value, int):
        result = value
    elif isinstance(value, float):
        result = int(value) if math.isfinite(value) else default
    elif isinstance(value, str):
        text = value.strip()
        try:
            result = int(text)
        except ValueError:
            try:
                parsed = float(text)
                result = int(parsed) if math.isfinite(parsed) else default
            except ValueError:
                result = default

    if minimum is not None and result < minimum:
        result = minimum
    if maximum is not None and result > maximum:
        result = maximum
    return result


def coerce_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Convert input to a finite float, or return the default."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def coerce_str(value: Any, default: str = "") -> str:
    """Return a stripped string, or the default for None/blank input."""
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default


def coerce_bool(value: Any) -> bool:
    """Interpret common truthy spellings; everything else is False."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y")
    return bool(value) if isinstance(value, (bool, int, float)) else False


def coerce_enum(enum_cls: Type[E], value: Any, default: Optional[E]) -> Optional[E]:
    """Match an enum member by value or name, case-insensitively."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    key = str(value).strip().lower()
    for member in enum_cls:
        if key == str(member.value).lower() or key == member.name.lower():
            return member
    return default


def as_list(value: Any) -> list:
    """Return a fresh list for list/tuple input, otherwise an empty list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


# =============================================================================
# CHARACTER COMPONENTS
# =============================================================================


@dataclass
class AbilityScore:
    """
    One ability score with its derived values.

    ``modifier`` and ``save`` are always recomputed by the resolver from
    ``score`` and ``proficient_save``.
    """
    score: int = 10
    modifier: int = 0
    save: int = 0
    proficient_save: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "modifier": self.modifier,
            "save": self.save,
            "proficientSave": self.proficient_save,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AbilityScore":
        # A bare number is accepted as the score itself
        if not isinstance(data, Mapping):
            return cls(score=coerce_int(data, 10))
        return cls(
            score=coerce_int(data.get("score"), 10),
            modifier=coerce_int(data.get("modifier"), 0),
            save=coerce_int(data.get("save"), 0),
            proficient_save=coerce_bool(
                data.get("proficientSave", data.get("proficient_save", False))
            ),
        )


@dataclass
class Skill:
    """A skill with its governing ability and proficiency tier."""
    name: str
    ability: Ability = Ability.STR
    proficiency: ProficiencyLevel = ProficiencyLevel.NONE
    modifier: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "ability": self.ability.value,
            "modifier": self.modifier,
            "proficiency": self.proficiency.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Skill":
        return cls(
            name=coerce_str(data.get("name"), "Unnamed Skill"),
            ability=coerce_enum(Ability, data.get("ability"), Ability.STR),
            proficiency=coerce_enum(
                ProficiencyLevel, data.get("proficiency"), ProficiencyLevel.NONE
            ),
            modifier=coerce_int(data.get("modifier"), 0),
        )


@dataclass
class Item:
    """
    An inventory item.

    Damage dice, range and AC hints live in the free-text ``notes``
    (e.g. "1d8 slashing, Finesse, Range 80/320").
    """
    name: str
    quantity: int = 1
    notes: str = ""
    item_type: Optional[ItemType] = None
    equipped: bool = False
    cost: Optional[float] = None    # In gp
    weight: Optional[float] = None  # In lb, per unit

    def get_total_weight(self) -> float:
        """Weight of the whole stack (0 when unknown)."""
        return (self.weight or 0.0) * self.quantity

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "quantity": self.quantity,
            "notes": self.notes,
            "equipped": self.equipped,
        }
        if self.item_type is not None:
            data["type"] = self.item_type.value
        if self.cost is not None:
            data["cost"] = self.cost
        if self.weight is not None:
            data["weight"] = self.weight
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        return cls(
            name=coerce_str(data.get("name"), "Unknown Item"),
            quantity=coerce_int(data.get("quantity"), 1, minimum=0),
            notes=coerce_str(data.get("notes"), ""),
            item_type=coerce_enum(ItemType, data.get("type", data.get("item_type")), None),
            equipped=coerce_bool(data.get("equipped", False)),
            cost=coerce_float(data.get("cost")),
            weight=coerce_float(data.get("weight")),
        )


@dataclass
class Attack:
    """An attack line derived from equipment."""
    name: str
    bonus: int
    damage: str
    damage_type: str
    range: Optional[str] = None
    properties: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "bonus": self.bonus,
            "damage": self.damage,
            "type": self.damage_type,
            "properties": list(self.properties),
        }
        if self.range is not None:
            data["range"] = self.range
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Attack":
        rng = data.get("range")
        return cls(
            name=coerce_str(data.get("name"), "Attack"),
            bonus=coerce_int(data.get("bonus"), 0),
            damage=coerce_str(data.get("damage"), "1"),
            damage_type=coerce_str(data.get("type"), "Damage"),
            range=coerce_str(rng) if rng is not None else None,
            properties=[coerce_str(p) for p in as_list(data.get("properties")) if coerce_str(p)],
        )


@dataclass
class Feature:
    """A racial, class, background or feat feature."""
    name: str
    source: FeatureSource = FeatureSource.CLASS
    description: str = ""
    full_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source": self.source.value,
            "description": self.description,
            "fullText": self.full_text,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Feature":
        return cls(
            name=coerce_str(data.get("name"), "Unnamed Feature"),
            source=coerce_enum(FeatureSource, data.get("source"), FeatureSource.CLASS),
            description=coerce_str(data.get("description")),
            full_text=coerce_str(data.get("fullText", data.get("full_text"))),
        )


@dataclass
class JournalEntry:
    """A player journal entry (note, NPC, location or session summary)."""
    entry_id: str
    timestamp: int = 0
    entry_type: str = "note"
    content: str = ""
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "timestamp": self.timestamp,
            "type": self.entry_type,
            "content": self.content,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JournalEntry":
        return cls(
            entry_id=coerce_str(data.get("id", data.get("entry_id")), ""),
            timestamp=coerce_int(data.get("timestamp"), 0),
            entry_type=coerce_str(data.get("type", data.get("entry_type")), "note"),
            content=coerce_str(data.get("content")),
            tags=[coerce_str(t) for t in as_list(data.get("tags")) if coerce_str(t)],
        )


@dataclass
class SpellSlot:
    """Slots for one spell level. ``current`` never exceeds ``maximum``."""
    level: int
    maximum: int
    current: int

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "max": self.maximum, "current": self.current}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SpellSlot":
        maximum = coerce_int(data.get("max", data.get("maximum")), 0, minimum=0)
        return cls(
            level=coerce_int(data.get("level"), 1, minimum=0, maximum=9),
            maximum=maximum,
            current=coerce_int(data.get("current"), maximum, minimum=0, maximum=maximum),
        )


@dataclass
class HitPoints:
    """Current and maximum hit points."""
    current: int = 10
    maximum: int = 10

    def to_dict(self) -> dict[str, Any]:
        return {"current": self.current, "max": self.maximum}

    @classmethod
    def from_dict(cls, data: Any) -> "HitPoints":
        data = _as_mapping(data)
        maximum = coerce_int(data.get("max", data.get("maximum")), 10, minimum=1)
        return cls(
            current=coerce_int(data.get("current"), 10, minimum=0, maximum=maximum),
            maximum=maximum,
        )


@dataclass
class HitDice:
    """Hit dice pool (e.g. 3 of 5 d10s remaining)."""
    current: int = 1
    maximum: int = 1
    die: str = "1d8"

    @property
    def sides(self) -> int:
        """Die size parsed from ``die`` ("1d10" -> 10), 8 if unreadable."""
        _, _, sides = self.die.lower().partition("d")
        return coerce_int(sides, 8, minimum=1)

    def to_dict(self) -> dict[str, Any]:
        return {"current": self.current, "max": self.maximum, "die": self.die}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HitDice":
        maximum = coerce_int(data.get("max", data.get("maximum")), 1, minimum=1)
        return cls(
            current=coerce_int(data.get("current"), maximum, minimum=0, maximum=maximum),
            maximum=maximum,
            die=coerce_str(data.get("die"), "1d8"),
        )


@dataclass
class Inventory:
    """Coins, items and the derived carry load."""
    gold: int = 0
    items: list[Item] = field(default_factory=list)
    load: CarryLoad = CarryLoad.LIGHT

    def equipped_items(self, item_type: ItemType) -> list[Item]:
        """Equipped items of one type, in inventory order."""
        return [i for i in self.items if i.equipped and i.item_type == item_type]

    def get_total_weight(self) -> float:
        return sum(item.get_total_weight() for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gold": self.gold,
            "items": [item.to_dict() for item in self.items],
            "load": self.load.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Inventory":
        data = _as_mapping(data)
        return cls(
            gold=coerce_int(data.get("gold"), 0),
            items=[Item.from_dict(i) for i in as_list(data.get("items")) if isinstance(i, Mapping)],
            load=coerce_enum(CarryLoad, data.get("load"), CarryLoad.LIGHT),
        )


# =============================================================================
# CHARACTER RECORD
# =============================================================================


def default_stats() -> dict[str, AbilityScore]:
    """A stat block with every score at 10."""
    return {key: AbilityScore() for key in ABILITY_KEYS}


# Document keys handled explicitly by CharacterRecord.from_dict/to_dict
_RECORD_KEYS = {
    "id", "campaign", "name", "nickname", "race", "class", "background",
    "alignment", "level", "portraitUrl", "stats", "hp", "ac", "initiative",
    "speed", "passivePerception", "skills", "attacks", "features",
    "inventory", "spellSlots", "hitDice", "journal", "spells",
}


@dataclass
class CharacterRecord:
    """
    Aggregate root for one character sheet.

    Raw inputs are the identity fields, ``level``, the ability ``score`` and
    ``proficient_save`` values, skill tiers, inventory and any player-tracked
    resources. Everything else is derived by the stat resolver.

    ``extras`` carries document keys this core does not interpret, so a
    load / recalculate / save cycle never drops data.
    """
    character_id: str = ""
    name: str = "Unknown Hero"
    race: str = "Human"
    character_class: str = ""
    level: int = 1
    stats: dict[str, AbilityScore] = field(default_factory=default_stats)
    hp: HitPoints = field(default_factory=HitPoints)
    armor_class: int = 10
    initiative: int = 0
    speed: int = 30
    passive_perception: int = 10
    skills: list[Skill] = field(default_factory=list)
    attacks: list[Attack] = field(default_factory=list)
    features: list[Feature] = field(default_factory=list)
    inventory: Inventory = field(default_factory=Inventory)
    spell_slots: list[SpellSlot] = field(default_factory=list)
    hit_dice: Optional[HitDice] = None  # None until the resolver fills it
    journal: list[JournalEntry] = field(default_factory=list)
    spells: list[dict[str, Any]] = field(default_factory=list)
    nickname: str = ""
    campaign: str = ""
    background: str = ""
    alignment: str = ""
    portrait_url: str = ""
    extras: dict[str, Any] = field(default_factory=dict)

    def get_ability(self, ability: str) -> AbilityScore:
        """Ability score block for a key, a neutral block if absent."""
        return self.stats.get(str(getattr(ability, "value", ability)).upper(), AbilityScore())

    def get_ability_modifier(self, ability: str) -> int:
        return self.get_ability(ability).modifier

    def get_skill(self, name: str) -> Optional[Skill]:
        """Find a skill by name, case-insensitively."""
        wanted = name.strip().lower()
        for skill in self.skills:
            if skill.name.lower() == wanted:
                return skill
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the document shape the persistence layer stores."""
        data: dict[str, Any] = dict(self.extras)
        data.update({
            "id": self.character_id,
            "campaign": self.campaign,
            "name": self.name,
            "nickname": self.nickname,
            "race": self.race,
            "class": self.character_class,
            "background": self.background,
            "alignment": self.alignment,
            "level": self.level,
            "portraitUrl": self.portrait_url,
            "stats": {key: score.to_dict() for key, score in self.stats.items()},
            "hp": self.hp.to_dict(),
            "ac": self.armor_class,
            "initiative": self.initiative,
            "speed": self.speed,
            "passivePerception": self.passive_perception,
            "skills": [s.to_dict() for s in self.skills],
            "attacks": [a.to_dict() for a in self.attacks],
            "features": [f.to_dict() for f in self.features],
            "inventory": self.inventory.to_dict(),
            "spellSlots": [s.to_dict() for s in self.spell_slots],
            "journal": [j.to_dict() for j in self.journal],
            "spells": [dict(s) for s in self.spells],
        })
        if self.hit_dice is not None:
            data["hitDice"] = self.hit_dice.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "CharacterRecord":
        """
        Build a record from a stored document, coercing every field.

        Never raises: non-mapping input yields a default record, malformed
        fields fall back to safe defaults and malformed list entries are
        skipped.
        """
        if not isinstance(data, Mapping):
            logger.debug("Character data is %s, not a mapping; using defaults", type(data).__name__)
            data = {}

        raw_stats = _as_mapping(data.get("stats"))
        stats = {}
        for key in ABILITY_KEYS:
            stats[key] = AbilityScore.from_dict(raw_stats[key]) if key in raw_stats else AbilityScore()

        raw_hit_dice = data.get("hitDice")

        return cls(
            character_id=coerce_str(data.get("id"), ""),
            name=coerce_str(data.get("name"), "Unknown Hero"),
            race=coerce_str(data.get("race"), "Human"),
            character_class=coerce_str(data.get("class"), ""),
            level=coerce_int(data.get("level"), 1, minimum=1),
            stats=stats,
            hp=HitPoints.from_dict(data.get("hp")),
            armor_class=coerce_int(data.get("ac"), 10),
            initiative=coerce_int(data.get("initiative"), 0),
            speed=coerce_int(data.get("speed"), 30, minimum=0),
            passive_perception=coerce_int(data.get("passivePerception"), 10),
            skills=[Skill.from_dict(s) for s in as_list(data.get("skills")) if isinstance(s, Mapping)],
            attacks=[Attack.from_dict(a) for a in as_list(data.get("attacks")) if isinstance(a, Mapping)],
            features=[Feature.from_dict(f) for f in as_list(data.get("features")) if isinstance(f, Mapping)],
            inventory=Inventory.from_dict(data.get("inventory")),
            spell_slots=[
                SpellSlot.from_dict(s) for s in as_list(data.get("spellSlots")) if isinstance(s, Mapping)
            ],
            hit_dice=HitDice.from_dict(raw_hit_dice) if isinstance(raw_hit_dice, Mapping) else None,
            journal=[JournalEntry.from_dict(j) for j in as_list(data.get("journal")) if isinstance(j, Mapping)],
            spells=[dict(s) for s in as_list(data.get("spells")) if isinstance(s, Mapping)],
            nickname=coerce_str(data.get("nickname")),
            campaign=coerce_str(data.get("campaign")),
            background=coerce_str(data.get("background")),
            alignment=coerce_str(data.get("alignment")),
            portrait_url=coerce_str(data.get("portraitUrl")),
            extras={k: v for k, v in data.items() if k not in _RECORD_KEYS},
        )


# =============================================================================
# DICE AND RANDOMIZATION
# =============================================================================


@dataclass(frozen=True)
class DiceTerm:
    """
    One parsed term of a dice expression.

    Either a dice term (``count`` dice of ``sides`` faces) or a flat
    modifier of magnitude ``value``; ``sign`` is +1 or -1 for both.
    """
    kind: TermKind
    sign: int = 1
    count: int = 0
    sides: int = 0
    value: int = 0

    @classmethod
    def dice(cls, count: int, sides: int, sign: int = 1) -> "DiceTerm":
        return cls(kind=TermKind.DICE, sign=sign, count=count, sides=sides)

    @classmethod
    def modifier(cls, value: int) -> "DiceTerm":
        return cls(kind=TermKind.MODIFIER, sign=-1 if value < 0 else 1, value=abs(value))

    @property
    def is_dice(self) -> bool:
        return self.kind == TermKind.DICE

    @property
    def signed_value(self) -> int:
        """Flat contribution of a modifier term (0 for dice terms)."""
        return self.sign * self.value if self.kind == TermKind.MODIFIER else 0

    def __str__(self) -> str:
        prefix = "-" if self.sign < 0 else "+"
        if self.is_dice:
            return f"{prefix}{self.count}d{self.sides}"
        return f"{prefix}{self.value}"


@dataclass
class DiceGroup:
    """Kept rolls for one dice term, plus the d20 dropped by adv/dis."""
    sides: int
    rolls: list[int]
    dropped: Optional[int] = None
    sign: int = 1

    @property
    def subtotal(self) -> int:
        return self.sign * sum(self.rolls)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"sides": self.sides, "rolls": list(self.rolls), "sign": self.sign}
        if self.dropped is not None:
            data["dropped"] = self.dropped
        return data

    def __str__(self) -> str:
        text = f"d{self.sides}{self.rolls}"
        if self.dropped is not None:
            text += f" (dropped {self.dropped})"
        return f"-{text}" if self.sign < 0 else text


@dataclass
class RollResult:
    """Result of rolling one expression, with the full per-term breakdown."""
    total: int
    expression: str
    dice_groups: list[DiceGroup] = field(default_factory=list)
    modifier: int = 0
    mode: RollMode = RollMode.NORMAL
    label: str = ""

    @property
    def rolls(self) -> list[int]:
        """Every kept die, in term order."""
        return [r for group in self.dice_groups for r in group.rolls]

    @property
    def dice_total(self) -> int:
        return sum(group.subtotal for group in self.dice_groups)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "total": self.total,
            "expression": self.expression,
            "diceGroups": [g.to_dict() for g in self.dice_groups],
            "modifier": self.modifier,
            "mode": self.mode.value,
        }

    def __str__(self) -> str:
        head = f"{self.label}: {self.expression}" if self.label else self.expression
        groups = " ".join(str(g) for g in self.dice_groups) or "[]"
        if self.mode != RollMode.NORMAL:
            head += f" ({self.mode.value})"
        if self.modifier > 0:
            return f"{head} => {groups} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{head} => {groups} - {abs(self.modifier)} = {self.total}"
        return f"{head} => {groups} = {self.total}"


@dataclass
class BatchRollEntry:
    """One request in a batch roll (e.g. a combatant's initiative)."""
    label: str
    expression: str
    base_modifier: int = 0
    mode: RollMode = RollMode.NORMAL

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BatchRollEntry":
        return cls(
            label=coerce_str(data.get("label"), ""),
            expression=coerce_str(data.get("expression"), ""),
            base_modifier=coerce_int(data.get("baseModifier", data.get("base_modifier")), 0),
            mode=RollMode.coerce(data.get("mode")),
        )


@dataclass(frozen=True)
class HitDieRoll:
    """A spent hit die: the raw face and the HP regained."""
    roll: int
    total: int
