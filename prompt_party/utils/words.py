"""Word bank and random pickers for round targets."""
import random
from typing import List, NamedTuple


class WordEntry(NamedTuple):
    """A target word with its difficulty and the words a prompt may not use."""

    word: str
    difficulty: str
    exclusion_words: List[str]


WORD_BANK: List[WordEntry] = [
    # Iconic movie characters
    WordEntry("Darth Vader", "medium", ["star wars", "vader", "sith", "dark side", "force", "lightsaber", "helmet", "breathing", "anakin"]),
    WordEntry("Iron Man", "medium", ["tony stark", "marvel", "suit", "armor", "avengers", "arc reactor", "tech", "flying", "red"]),
    WordEntry("Mickey Mouse", "easy", ["disney", "mouse", "ears", "cartoon", "mickey", "minnie", "disneyland", "walt", "animation"]),
    # Sports
    WordEntry("Basketball", "easy", ["hoop", "court", "ball", "nba", "dribble", "shoot", "game", "sport", "player"]),
    WordEntry("Formula One", "medium", ["racing", "car", "driver", "track", "speed", "race", "f1", "grand prix", "podium"]),
    WordEntry("Surfing", "medium", ["wave", "ocean", "board", "beach", "water", "surf", "ride", "sea", "shore"]),
    # Fantasy and mythology
    WordEntry("Dragon", "medium", ["fire", "wing", "scale", "mythical", "beast", "fly", "breath", "creature", "monster"]),
    WordEntry("Phoenix", "hard", ["fire", "bird", "rebirth", "mythical", "rise", "flame", "immortal", "ashes", "legend"]),
    # Landmarks and architecture
    WordEntry("Eiffel Tower", "medium", ["paris", "france", "tower", "landmark", "iron", "structure", "tourist", "city", "monument"]),
    WordEntry("Taj Mahal", "medium", ["india", "marble", "palace", "tomb", "architecture", "white", "dome", "monument", "agra"]),
    # Nature
    WordEntry("Aurora Borealis", "hard", ["northern lights", "sky", "color", "aurora", "night", "light", "polar", "dance", "green"]),
    WordEntry("Volcano", "medium", ["mountain", "lava", "eruption", "magma", "fire", "smoke", "crater", "ash", "geyser"]),
    # Technology
    WordEntry("Robot", "medium", ["machine", "metal", "technology", "automated", "mechanical", "ai", "circuit", "battery", "sensor"]),
    WordEntry("Space Station", "hard", ["space", "orbit", "astronaut", "satellite", "nasa", "iss", "station", "gravity", "module"]),
    # Entertainment and culture
    WordEntry("Circus", "medium", ["clown", "tent", "performance", "entertainment", "acrobat", "ring", "elephant", "trapeze", "juggler"]),
    WordEntry("Jazz Band", "hard", ["music", "jazz", "band", "instrument", "saxophone", "trumpet", "piano", "drum", "performance"]),
    # Everyday things
    WordEntry("Cat", "easy", ["kitten", "feline", "whiskers", "meow", "purr", "paws", "tail"]),
    WordEntry("Dog", "easy", ["puppy", "canine", "bark", "leash", "fetch", "paws", "tail"]),
    WordEntry("House", "easy", ["home", "roof", "door", "window", "chimney", "building", "family"]),
    WordEntry("Tree", "easy", ["leaves", "branch", "trunk", "forest", "wood", "roots", "bark"]),
    # Sky and weather
    WordEntry("Sun", "easy", ["sunshine", "solar", "bright", "daylight", "summer", "heat", "yellow"]),
    WordEntry("Moon", "easy", ["lunar", "crescent", "night", "crater", "full", "orbit", "tide"]),
    WordEntry("Star", "easy", ["twinkle", "night sky", "shining", "galaxy", "constellation", "wish", "sparkle"]),
    WordEntry("Cloud", "easy", ["fluffy", "white", "weather", "sky", "rain", "storm", "cumulus"]),
    WordEntry("Rain", "easy", ["drops", "umbrella", "storm", "puddle", "weather", "drizzle", "cloud"]),
    WordEntry("Snow", "easy", ["snowflake", "winter", "cold", "white", "frozen", "snowman", "blizzard"]),
    # Places
    WordEntry("Beach", "medium", ["ocean", "sand", "sun", "water", "swimming", "vacation", "waves"]),
    WordEntry("Mountain", "medium", ["peak", "summit", "climb", "hiking", "rocky", "snow", "altitude"]),
    WordEntry("Forest", "medium", ["trees", "nature", "woods", "green", "plants", "wildlife", "jungle"]),
    WordEntry("River", "medium", ["water", "stream", "flow", "current", "boat", "fish", "canoe"]),
    WordEntry("Ocean", "medium", ["sea", "waves", "water", "salt", "deep", "marine", "tide"]),
    WordEntry("Castle", "medium", ["building", "stone", "medieval", "king", "fortress", "tower", "knight"]),
    WordEntry("Bridge", "medium", ["river", "cross", "span", "arch", "crossing", "golden gate", "road"]),
    WordEntry("Tower", "medium", ["tall", "high", "building", "skyscraper", "spire", "height", "climb"]),
    WordEntry("Garden", "medium", ["flowers", "plants", "grow", "soil", "vegetables", "gardener", "bloom"]),
    WordEntry("Fountain", "medium", ["water", "spray", "splash", "coins", "wish", "plaza", "basin"]),
    # Mythical creatures
    WordEntry("Unicorn", "hard", ["horn", "horse", "rainbow", "magical", "sparkle", "mythical", "pony"]),
    WordEntry("Mermaid", "hard", ["fish", "tail", "ocean", "sea", "siren", "scales", "little"]),
    WordEntry("Centaur", "hard", ["horse", "half", "archer", "arrow", "greek", "mythology", "legs"]),
    WordEntry("Griffin", "hard", ["eagle", "lion", "wings", "beak", "claws", "mythical", "talons"]),
    WordEntry("Pegasus", "hard", ["horse", "wings", "flying", "white", "greek", "mythology", "clouds"]),
    WordEntry("Kraken", "hard", ["tentacles", "squid", "octopus", "sea", "monster", "ship", "deep"]),
    WordEntry("Sphinx", "hard", ["egypt", "lion", "pyramid", "riddle", "desert", "statue", "pharaoh"]),
    WordEntry("Minotaur", "hard", ["bull", "horns", "maze", "labyrinth", "greek", "monster", "crete"]),
]


def pick_word() -> WordEntry:
    """Return a uniformly random entry (with replacement).

    Returns:
        A random WordEntry.
    """
    return random.choice(WORD_BANK)


def pick_words(count: int) -> List[WordEntry]:
    """Return ``count`` entries from a shuffled copy of the bank.

    Entries are distinct while ``count`` fits in the bank. Larger requests
    are filled with further independent shuffles, so words repeat.

    Args:
        count: Number of entries wanted.

    Returns:
        List of WordEntry of length ``count``.
    """
    picked: List[WordEntry] = []
    while len(picked) < count:
        shuffled = list(WORD_BANK)
        random.shuffle(shuffled)
        picked.extend(shuffled[: count - len(picked)])
    return picked


def exclusions_for(word: str | None) -> List[str]:
    """Return the exclusion words for ``word`` (case-insensitive), or [] if unknown."""
    if not word:
        return []
    lowered = word.lower()
    for entry in WORD_BANK:
        if entry.word.lower() == lowered:
            return list(entry.exclusion_words)
    return []
