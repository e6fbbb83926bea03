from cuescore.century import CenturyGame
from cuescore.logging_config import configure_logging
from cuescore.snooker import SnookerGame

configure_logging()

# Century singles: 14 Blacks then a Yellow -> exactly 100
century = CenturyGame.start("singles-2", names=["Arvinder", ""])

for _ in range(14):
    century.pot("Black")

print("Before winning pot:", century.scoreboard().scores)

result = century.pot("Yellow")
print("Winner:", century.scoreboard().winner)
print("Last event:", result.events[-1])

print("\nTrying to pot after the game is over...")
print(century.pot("Red").rejection)

# Snooker singles: a 21 break ended by a foul
snooker = SnookerGame.start("singles")

for color in ["Black", "Pink", "Blue"]:
    snooker.pot("Red")
    snooker.pot(color)

snooker.foul()
print("\nAfter foul:", snooker.scoreboard())

snooker.undo()
print("After undo:", snooker.scoreboard())
