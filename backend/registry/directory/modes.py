"""Raw game-mode identifiers reported in beacons, grouped into client categories."""

from types import MappingProxyType

ADVERSARIAL = "adv"
COOPERATIVE = "coop"

MODE_CATEGORIES = MappingProxyType(
    {
        # Raven Shield
        "RGM_BombAdvMode": ADVERSARIAL,  # Bomb
        "RGM_DeathmatchMode": ADVERSARIAL,  # Survival
        "RGM_EscortAdvMode": ADVERSARIAL,  # Pilot
        "RGM_HostageRescueAdvMode": ADVERSARIAL,  # Hostage
        "RGM_HostageRescueCoopMode": COOPERATIVE,  # Hostage Rescue
        "RGM_HostageRescueMode": COOPERATIVE,
        "RGM_MissionMode": COOPERATIVE,  # Mission
        "RGM_SquadDeathmatch": ADVERSARIAL,
        "RGM_SquadTeamDeathmatch": ADVERSARIAL,
        "RGM_TeamDeathmatchMode": ADVERSARIAL,  # Team Survival
        "RGM_TerroristHuntCoopMode": COOPERATIVE,  # Terrorist Hunt
        "RGM_TerroristHuntMode": COOPERATIVE,
        # Athena Sword
        "RGM_CaptureTheEnemyAdvMode": ADVERSARIAL,
        "RGM_CountDownMode": COOPERATIVE,
        "RGM_KamikazeMode": ADVERSARIAL,
        "RGM_ScatteredHuntAdvMode": ADVERSARIAL,
        "RGM_TerroristHuntAdvMode": ADVERSARIAL,
    },
)


def classify_mode(raw_mode: str) -> str:
    """Return the category for a raw mode identifier, or "" when unknown."""
    return MODE_CATEGORIES.get(raw_mode, "")
