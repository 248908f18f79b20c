"""
Content Library

Static word lists, sentence frames, choice templates and effect profiles
used by the content generators, plus the default training corpus for the
Markov engine. Tables are keyed by upper-case event type with a GENERIC
entry for anything else.
"""

from typing import Dict, List, NamedTuple, Tuple

EVENT_TYPES: Tuple[str, ...] = (
    "ADVENTURE",
    "COMBAT",
    "ECONOMIC",
    "EXPLORATION",
    "GUILD",
    "MAGIC",
    "MYSTERY",
    "POLITICAL",
    "QUEST",
    "SOCIAL",
    "SPELLCASTING",
    "SUPERNATURAL",
    "TECHNOLOGICAL",
    "UNDERWORLD",
)


# ============================================================================
# Titles
# ============================================================================

TITLE_ADJECTIVES: Dict[str, List[str]] = {
    "ADVENTURE": ["Daring", "Perilous", "Uncharted", "Bold", "Wandering"],
    "COMBAT": ["Bloody", "Savage", "Desperate", "Brutal", "Sudden"],
    "ECONOMIC": ["Lucrative", "Risky", "Golden", "Shrewd", "Volatile"],
    "EXPLORATION": ["Hidden", "Forgotten", "Distant", "Overgrown", "Silent"],
    "GUILD": ["Sworn", "Rival", "Secret", "Honored", "Ancient"],
    "MAGIC": ["Arcane", "Shimmering", "Unstable", "Eldritch", "Radiant"],
    "MYSTERY": ["Strange", "Cryptic", "Veiled", "Puzzling", "Unspoken"],
    "POLITICAL": ["Royal", "Treacherous", "Noble", "Contested", "Whispered"],
    "QUEST": ["Sacred", "Urgent", "Lost", "Noble", "Final"],
    "SOCIAL": ["Grand", "Lively", "Awkward", "Charming", "Festive"],
    "SPELLCASTING": ["Runic", "Volatile", "Binding", "Arcane", "Flickering"],
    "SUPERNATURAL": ["Haunted", "Cursed", "Spectral", "Unholy", "Ominous"],
    "TECHNOLOGICAL": ["Clockwork", "Ingenious", "Broken", "Humming", "Experimental"],
    "UNDERWORLD": ["Shadowy", "Crooked", "Dangerous", "Smuggled", "Hushed"],
    "GENERIC": ["Unexpected", "Curious", "Fateful", "Peculiar", "Pressing"],
}

TITLE_NOUNS: Dict[str, List[str]] = {
    "ADVENTURE": ["Journey", "Expedition", "Crossing", "Venture", "Trail"],
    "COMBAT": ["Ambush", "Skirmish", "Duel", "Battle", "Raid"],
    "ECONOMIC": ["Bargain", "Venture", "Auction", "Contract", "Shipment"],
    "EXPLORATION": ["Ruins", "Cavern", "Passage", "Valley", "Vault"],
    "GUILD": ["Summons", "Initiation", "Charter", "Dispute", "Commission"],
    "MAGIC": ["Ritual", "Artifact", "Surge", "Conjuring", "Relic"],
    "MYSTERY": ["Disappearance", "Riddle", "Letter", "Stranger", "Omen"],
    "POLITICAL": ["Decree", "Intrigue", "Alliance", "Succession", "Council"],
    "QUEST": ["Calling", "Pilgrimage", "Errand", "Oath", "Search"],
    "SOCIAL": ["Banquet", "Gathering", "Festival", "Invitation", "Reunion"],
    "SPELLCASTING": ["Incantation", "Glyph", "Spellbook", "Ward", "Circle"],
    "SUPERNATURAL": ["Apparition", "Curse", "Visitation", "Haunting", "Whisper"],
    "TECHNOLOGICAL": ["Contraption", "Device", "Workshop", "Engine", "Blueprint"],
    "UNDERWORLD": ["Heist", "Racket", "Deal", "Smuggler", "Hideout"],
    "GENERIC": ["Encounter", "Opportunity", "Situation", "Event", "Moment"],
}

WEALTH_ADJECTIVES: Dict[str, List[str]] = {
    "poor": ["Humble", "Ragged", "Meager"],
    "wealthy": ["Prosperous", "Polished"],
    "rich": ["Gilded", "Opulent", "Lavish"],
}

LIFE_STAGE_ADJECTIVES: Dict[str, List[str]] = {
    "youth": ["Reckless", "Youthful", "Impetuous"],
    "experienced": ["Seasoned", "Weathered"],
    "elder": ["Venerable", "Fading", "Twilight"],
}

TITLE_SUFFIXES: Dict[str, List[str]] = {
    "ADVENTURE": ["Beyond the Ridge", "at the World's Edge", "Under Open Skies"],
    "COMBAT": ["at Dawn", "in the Mud", "at the Crossroads"],
    "ECONOMIC": ["in the Market Square", "at the Docks", "of the Merchant Quarter"],
    "EXPLORATION": ["Beneath the Hills", "in the Deep Woods", "Past the Old Wall"],
    "GUILD": ["of the Guildhall", "Behind Closed Doors"],
    "MAGIC": ["of the Shattered Tower", "Under a Violet Moon"],
    "MYSTERY": ["in the Fog", "at Midnight", "of the Empty House"],
    "POLITICAL": ["at Court", "in the Throne Room", "of the High Council"],
    "QUEST": ["of the Forgotten Shrine", "for the Crown"],
    "SOCIAL": ["at the Manor", "in the Tavern"],
    "SPELLCASTING": ["of Binding Words", "in the Circle of Stones"],
    "SUPERNATURAL": ["of the Restless Dead", "Beyond the Veil"],
    "TECHNOLOGICAL": ["of Brass and Steam", "in the Artificer's Hall"],
    "UNDERWORLD": ["in the Back Alleys", "Beneath the Streets"],
    "GENERIC": ["of Fate", "on the Road"],
}

TITLE_FORMATS = (
    "The {adjective} {noun}",
    "{adjective} {noun}",
    "A {adjective} {noun}",
)


# ============================================================================
# Descriptions
# ============================================================================

# {subject} is the title's adjective and noun in lower case
DESCRIPTION_FRAMES = (
    "{article} {subject} {verb_phrase}.",
    "Without warning, {article_lower} {subject} {verb_phrase}.",
    "Word spreads of {article_lower} {subject} that {verb_phrase}.",
    "You learn that {article_lower} {subject} {verb_phrase}.",
    "It begins quietly, but the {subject} soon {verb_phrase}.",
)

VERB_PHRASES: Dict[str, List[str]] = {
    "ADVENTURE": ["beckons you toward the unknown", "promises glory to those bold enough",
                  "calls you away from the safety of the road"],
    "COMBAT": ["blocks your path with drawn steel", "threatens everyone nearby",
               "forces you to decide whether to stand or run"],
    "ECONOMIC": ["could double your purse or empty it", "draws every merchant in town",
                 "demands a quick decision and a steady nerve"],
    "EXPLORATION": ["lies waiting for someone to uncover it", "hides secrets older than the kingdom",
                    "opens before you where no map shows a path"],
    "GUILD": ["tests your loyalty to the guild", "stirs old resentments among the members",
              "requires someone of your standing"],
    "MAGIC": ["crackles with raw power", "bends the air around it",
              "draws the attention of every mage for miles"],
    "MYSTERY": ["raises questions no one will answer", "leaves a trail of odd clues",
                "refuses to make sense no matter how you look at it"],
    "POLITICAL": ["threatens the balance of power", "sets the nobles whispering",
                  "could raise or ruin a great house"],
    "QUEST": ["asks more of you than anyone has before", "points toward a long road ahead",
              "will not be finished without sacrifice"],
    "SOCIAL": ["brings together people you would not expect", "fills the hall with music and gossip",
               "offers a chance to make useful friends"],
    "SPELLCASTING": ["hums with a spell half finished", "resists every attempt to dispel it",
                     "could be mastered by a patient caster"],
    "SUPERNATURAL": ["chills the blood of everyone nearby", "lingers where the living should not",
                     "speaks in a voice from beyond the grave"],
    "TECHNOLOGICAL": ["whirs and clicks with unknown purpose", "could change how the realm works",
                      "has clearly been built by a brilliant mind"],
    "UNDERWORLD": ["is whispered about only in the darkest taverns", "draws the eyes of thieves and informants",
                   "pays well for those who ask no questions"],
    "GENERIC": ["demands your attention", "changes the shape of your day",
                "cannot easily be ignored"],
}

CONTEXTUAL_SENTENCES: Dict[str, Dict[str, List[str]]] = {
    "wealth": {
        "poor": ["Your empty purse makes every coin at stake feel heavier.",
                 "Anything that pays would be welcome right now."],
        "wealthy": ["Your fine clothes draw more attention than you would like."],
        "rich": ["Your considerable fortune has not gone unnoticed.",
                 "Those who know your wealth watch to see what you will do."],
    },
    "life_stage": {
        "youth": ["Older folk watch to see how someone so young will respond."],
        "experienced": ["You have seen enough to know this matters."],
        "elder": ["Your long years have taught you that such moments rarely come twice."],
    },
    "skill": {
        "combat": ["Your hand drifts instinctively toward your weapon."],
        "social": ["You already sense how to talk your way through this."],
        "magic": ["The weave of magic around you stirs in response."],
        "technical": ["Your trained eye catches details others would miss."],
    },
}

# Descriptions that say nothing specific about the event
GENERIC_PHRASES = (
    "You find yourself in a strange place.",
    "You find yourself in a dangerous confrontation.",
    "Something unexpected happened.",
    "Something happens.",
    "An event occurs.",
    "A situation arises.",
    "Combat is unavoidable.",
    "Adventure awaits.",
    "You encounter something interesting.",
)


# ============================================================================
# Choices and effects
# ============================================================================

CHOICE_TEMPLATES: Dict[str, List[str]] = {
    "ADVENTURE": ["Press on into the unknown", "Scout ahead carefully", "Rally companions first",
                  "Turn back while you can"],
    "COMBAT": ["Draw your weapon and fight", "Try to talk your way out", "Flee into the shadows",
               "Set a trap and wait"],
    "ECONOMIC": ["Invest heavily", "Make a cautious offer", "Walk away from the deal",
                 "Haggle for better terms"],
    "EXPLORATION": ["Explore deeper", "Map the area and leave", "Search for hidden passages",
                    "Mark the spot for later"],
    "GUILD": ["Stand with the guild", "Negotiate privately with the masters", "Refuse the summons",
              "Offer your services for a fee"],
    "MAGIC": ["Study the phenomenon", "Attempt to harness the power", "Seal it away",
              "Seek out a learned mage"],
    "MYSTERY": ["Investigate thoroughly", "Question the locals", "Follow the strongest lead",
                "Leave the matter alone"],
    "POLITICAL": ["Support the crown", "Side with the reformers", "Stay publicly neutral",
                  "Quietly gather leverage"],
    "QUEST": ["Accept the task", "Ask for a greater reward", "Decline politely",
              "Recruit help before setting out"],
    "SOCIAL": ["Join the festivities", "Work the room", "Keep to yourself",
               "Leave early"],
    "SPELLCASTING": ["Complete the incantation", "Disrupt the spell", "Copy the runes for study",
                     "Ward yourself and observe"],
    "SUPERNATURAL": ["Confront the presence", "Perform a cleansing rite", "Flee before dark",
                     "Try to communicate with it"],
    "TECHNOLOGICAL": ["Tinker with the mechanism", "Sell the design", "Dismantle it for parts",
                      "Find the inventor"],
    "UNDERWORLD": ["Take the job", "Report it to the watch", "Demand a bigger cut",
                   "Disappear before anyone notices"],
    "GENERIC": ["Take action", "Wait and observe", "Seek advice", "Walk away"],
}


class EffectRule(NamedTuple):
    stat: str
    low: int
    high: int
    likelihood: float = 1.0
    as_range: bool = False


# The first rule of each profile always applies; later ones apply by likelihood
EFFECT_PROFILES: Dict[str, List[EffectRule]] = {
    "ADVENTURE": [EffectRule("experience", 5, 20), EffectRule("gold", -10, 40, 0.5),
                  EffectRule("health", -10, 5, 0.4)],
    "COMBAT": [EffectRule("health", -20, -5), EffectRule("gold", 5, 40, 0.4),
               EffectRule("experience", 5, 20, 0.7)],
    "ECONOMIC": [EffectRule("gold", -50, 80, as_range=True), EffectRule("reputation", -2, 5, 0.4)],
    "EXPLORATION": [EffectRule("experience", 5, 15), EffectRule("gold", 0, 50, 0.5),
                    EffectRule("health", -10, 0, 0.3)],
    "GUILD": [EffectRule("reputation", -3, 6), EffectRule("influence", 0, 10, 0.5),
              EffectRule("gold", -20, 30, 0.4)],
    "MAGIC": [EffectRule("experience", 5, 20), EffectRule("health", -15, 5, 0.5),
              EffectRule("magic", 1, 5, 0.4)],
    "MYSTERY": [EffectRule("experience", 0, 15), EffectRule("gold", -10, 50, 0.4, True),
                EffectRule("reputation", -2, 4, 0.3)],
    "POLITICAL": [EffectRule("influence", -10, 15), EffectRule("reputation", -5, 8, 0.6),
                  EffectRule("gold", -30, 30, 0.3)],
    "QUEST": [EffectRule("experience", 10, 25), EffectRule("gold", 10, 60, 0.6),
              EffectRule("reputation", 0, 5, 0.4)],
    "SOCIAL": [EffectRule("reputation", -2, 6), EffectRule("influence", 0, 8, 0.5),
               EffectRule("gold", -15, 0, 0.3)],
    "SPELLCASTING": [EffectRule("magic", 1, 6), EffectRule("health", -12, 0, 0.4),
                     EffectRule("experience", 5, 15, 0.6)],
    "SUPERNATURAL": [EffectRule("health", -15, 5), EffectRule("experience", 5, 20, 0.6),
                     EffectRule("reputation", -3, 3, 0.3)],
    "TECHNOLOGICAL": [EffectRule("gold", -20, 60), EffectRule("technical", 1, 5, 0.5),
                      EffectRule("experience", 0, 15, 0.5)],
    "UNDERWORLD": [EffectRule("gold", 10, 70), EffectRule("reputation", -8, 0, 0.6),
                   EffectRule("health", -15, 0, 0.4)],
    "GENERIC": [EffectRule("gold", -10, 50), EffectRule("health", -5, 10, 0.5),
                EffectRule("experience", 0, 20, 0.5), EffectRule("reputation", -2, 5, 0.3)],
}

THEMATIC_TAGS: Dict[str, List[str]] = {
    "ADVENTURE": ["wanderlust", "glory"],
    "COMBAT": ["bloodshed", "honor", "survival"],
    "ECONOMIC": ["fortune", "trade"],
    "EXPLORATION": ["discovery", "wilderness"],
    "GUILD": ["loyalty", "brotherhood"],
    "MAGIC": ["arcana", "wonder"],
    "MYSTERY": ["intrigue", "secrets"],
    "POLITICAL": ["power", "betrayal"],
    "QUEST": ["destiny", "duty"],
    "SOCIAL": ["romance", "rivalry"],
    "SPELLCASTING": ["arcana", "discipline"],
    "SUPERNATURAL": ["dread", "the-beyond"],
    "TECHNOLOGICAL": ["invention", "progress"],
    "UNDERWORLD": ["crime", "greed"],
    "GENERIC": ["fate", "chance"],
}


# ============================================================================
# Default corpus
# ============================================================================

DEFAULT_CORPUS: Dict[str, List[str]] = {
    "ADVENTURE": [
        "The road ahead winds through hills no traveler has crossed in years.",
        "A weathered map promises treasure beyond the northern pass.",
        "The caravan master offers you a place among his outriders.",
        "Rumors of a lost city draw adventurers from every corner of the realm.",
    ],
    "COMBAT": [
        "Armed bandits block the road and demand your purse.",
        "A hulking brute challenges you to settle the matter with steel.",
        "The clash of blades echoes through the narrow mountain pass.",
        "Wounded soldiers stagger out of the smoke with the enemy close behind.",
    ],
    "ECONOMIC": [
        "A nervous merchant offers you a share in a risky cargo of spices.",
        "Prices in the market square have doubled since the harvest failed.",
        "The moneylender smiles and slides a contract across the table.",
        "A rival trading house is quietly buying every warehouse by the docks.",
    ],
    "EXPLORATION": [
        "Ancient ruins rise from the mist where the old maps show only forest.",
        "A hidden staircase descends beneath the ruined chapel.",
        "The cavern walls glitter with strange crystals and older carvings.",
        "Wild country stretches beyond the last watchtower on the frontier.",
    ],
    "GUILD": [
        "The guild masters summon you to answer for a broken contract.",
        "A rival guild has been poaching apprentices from the workshops.",
        "Your guild brothers argue late into the night about the new charter.",
        "The guildhall bell rings to call every member to an urgent council.",
    ],
    "MAGIC": [
        "A shimmering portal flickers open in the middle of the village square.",
        "The old tower hums with magic that no living mage can explain.",
        "Arcane sparks dance across the surface of the stolen artifact.",
        "The apprentice swears the spellbook whispered to him during the night.",
    ],
    "MYSTERY": [
        "The village elder disappeared without a trace three nights ago.",
        "A sealed letter arrives bearing a crest no herald recognizes.",
        "Footprints lead into the locked room but none lead out.",
        "The stranger at the inn knows far too much about your past.",
    ],
    "POLITICAL": [
        "The king's advisor seeks allies against the scheming chancellor.",
        "A noble house offers its support in exchange for a dangerous favor.",
        "Whispers of rebellion spread through the court like wildfire.",
        "The council must choose a successor before the old duke dies.",
    ],
    "QUEST": [
        "A dying knight begs you to carry his oath to the distant shrine.",
        "The temple priests seek a champion to recover the stolen relic.",
        "An old friend asks for help finding a missing brother in the marshes.",
        "The village will not survive the winter unless someone reaches the capital.",
    ],
    "SOCIAL": [
        "A grand banquet brings together the most powerful families of the city.",
        "An old rival greets you warmly at the harvest festival.",
        "The tavern falls silent as a famous bard takes the stage.",
        "A charming stranger invites you to join a private gathering.",
    ],
    "SPELLCASTING": [
        "The runes in the circle glow brighter as the incantation nears its end.",
        "A half finished spell hangs in the air waiting for a steady voice.",
        "The ward around the library flickers as someone tries to break it.",
        "Your fingers tingle as the binding words take hold.",
    ],
    "SUPERNATURAL": [
        "A ghostly figure appears at the foot of your bed and points toward the crypt.",
        "The graveyard bells ring at midnight though no hand touches them.",
        "An ancient curse stirs beneath the cursed stones of the old barrow.",
        "Cold whispers follow you through the empty halls of the abbey.",
    ],
    "TECHNOLOGICAL": [
        "A clockwork automaton wanders into the market and begins to speak.",
        "The inventor demonstrates a machine that pumps water without horses.",
        "Gears and pistons clatter inside the sealed iron box.",
        "A brilliant artificer needs rare parts to finish her greatest device.",
    ],
    "UNDERWORLD": [
        "A hooded figure offers good coin for a job with no questions asked.",
        "The thieves guild wants a word with you in the back of the tavern.",
        "Smugglers unload crates under cover of darkness at the old pier.",
        "An informant claims to know who ordered the attack on the magistrate.",
    ],
}
