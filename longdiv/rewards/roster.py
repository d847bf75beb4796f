"""
Dinosaur reward roster.

Rewards are assigned by position, never at random: reward number ``k`` (the
k-th milestone) always maps to ``DINOSAUR_ROSTER[(k - 1) % len(roster)]``.
"""

from __future__ import annotations

import re
from typing import Optional

from ..errors import InvalidArgumentError, require_non_negative_int, require_positive_int

REWARD_UNLOCK_INTERVAL = 5
EXPECTED_ROSTER_SIZE = 100

# Film-franchise favorites come first so early milestones feel familiar
PRIORITY_DINOSAURS = (
    "Tyrannosaurus Rex",
    "Velociraptor",
    "Triceratops",
    "Brachiosaurus",
    "Dilophosaurus",
    "Spinosaurus",
    "Stegosaurus",
    "Parasaurolophus",
    "Gallimimus",
    "Compsognathus",
    "Pteranodon",
    "Mosasaurus",
    "Indominus Rex",
    "Indoraptor",
    "Giganotosaurus",
    "Therizinosaurus",
    "Atrociraptor",
    "Pyroraptor",
    "Dimetrodon",
    "Sinoceratops",
)

EXTENDED_DINOSAURS = (
    "Allosaurus", "Carnotaurus", "Baryonyx", "Ankylosaurus", "Pachycephalosaurus",
    "Dimorphodon", "Nasutoceratops", "Quetzalcoatlus", "Dreadnoughtus", "Oviraptor",
    "Corythosaurus", "Ceratosaurus", "Suchomimus", "Mamenchisaurus", "Metriacanthosaurus",
    "Edmontosaurus", "Microceratus", "Apatosaurus", "Stigimoloch", "Monolophosaurus",
    "Lystrosaurus", "Moros intrepidus", "Iguanodon", "Kentrosaurus", "Proceratosaurus",
    "Segisaurus", "Herrerasaurus", "Majungasaurus", "Concavenator", "Acrocanthosaurus",
    "Carcharodontosaurus", "Pachyrhinosaurus", "Albertosaurus", "Deinonychus", "Utahraptor",
    "Plateosaurus", "Coelophysis", "Ornithomimus", "Struthiomimus", "Hadrosaurus",
    "Lambeosaurus", "Maiasaura", "Protoceratops", "Amargasaurus", "Nigersaurus",
    "Dsungaripterus", "Tupandactylus", "Nothosaurus", "Plesiosaurus", "Ichthyosaurus",
    "Sarcosuchus", "Deinosuchus", "Kaprosuchus", "Megalosaurus", "Rajasaurus",
    "Irritator", "Gigantoraptor", "Europasaurus", "Scolosaurus", "Minmi",
    "Sauropelta", "Nodosaurus", "Polacanthus", "Gastonia", "Crichtonsaurus",
    "Mussaurus", "Lesothosaurus", "Scutellosaurus", "Pisanosaurus", "Eoraptor",
    "Chromogisaurus", "Panphagia", "Saturnalia", "Guaibasaurus", "Staurikosaurus",
    "Buriolestes", "Gnathovorax", "Bagualosaurus", "Nhandumirim", "Erythrovenator",
)

DINOSAUR_ROSTER: tuple[str, ...] = PRIORITY_DINOSAURS + EXTENDED_DINOSAURS

if len(DINOSAUR_ROSTER) != EXPECTED_ROSTER_SIZE:
    raise RuntimeError(
        f"Expected {EXPECTED_ROSTER_SIZE} dinosaurs but found {len(DINOSAUR_ROSTER)}."
    )
if len(set(DINOSAUR_ROSTER)) != len(DINOSAUR_ROSTER):
    raise RuntimeError("DINOSAUR_ROSTER contains duplicate dinosaur names.")

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def reward_number_for_solved_count(total_solved: int, interval: int = REWARD_UNLOCK_INTERVAL) -> int:
    """Highest milestone number earned at ``total_solved`` (0 if none)."""
    require_non_negative_int(total_solved, "total_solved")
    require_positive_int(interval, "interval")
    return total_solved // interval


def milestone_solved_count_for_reward(reward_number: int, interval: int = REWARD_UNLOCK_INTERVAL) -> int:
    """Solved count at which reward ``reward_number`` unlocks."""
    require_positive_int(reward_number, "reward_number")
    require_positive_int(interval, "interval")
    return reward_number * interval


def dinosaur_for_reward_number(reward_number: int) -> str:
    require_positive_int(reward_number, "reward_number")
    return DINOSAUR_ROSTER[(reward_number - 1) % len(DINOSAUR_ROSTER)]


def most_recent_unlocked_dinosaur(
    total_solved: int, interval: int = REWARD_UNLOCK_INTERVAL
) -> Optional[str]:
    """Name of the latest dinosaur earned, or None before the first milestone."""
    reward_number = reward_number_for_solved_count(total_solved, interval)
    if reward_number == 0:
        return None
    return dinosaur_for_reward_number(reward_number)


def next_dinosaur_to_unlock(unlocked_count: int) -> str:
    require_non_negative_int(unlocked_count, "unlocked_count")
    return DINOSAUR_ROSTER[unlocked_count % len(DINOSAUR_ROSTER)]


def unlock_order(start_reward_number: int, count: int) -> tuple[str, ...]:
    """Names for ``count`` consecutive rewards starting at ``start_reward_number``."""
    require_positive_int(start_reward_number, "start_reward_number")
    require_non_negative_int(count, "count")
    return tuple(dinosaur_for_reward_number(start_reward_number + i) for i in range(count))


def reward_image_slug(name: str) -> str:
    """
    Filesystem-safe slug for a dinosaur name.

    >>> reward_image_slug("Tyrannosaurus Rex")
    'tyrannosaurus-rex'
    """
    slug = _SLUG_PATTERN.sub("-", name.strip().lower()).strip("-")
    if not slug:
        raise InvalidArgumentError("name must include alphanumeric characters.", argument="name")
    return slug


__all__ = [
    "REWARD_UNLOCK_INTERVAL",
    "DINOSAUR_ROSTER",
    "PRIORITY_DINOSAURS",
    "reward_number_for_solved_count",
    "milestone_solved_count_for_reward",
    "dinosaur_for_reward_number",
    "most_recent_unlocked_dinosaur",
    "next_dinosaur_to_unlock",
    "unlock_order",
    "reward_image_slug",
]
