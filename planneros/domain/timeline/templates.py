"""Day-of run sheets for common Indian wedding functions"""

# (start time, title, owner, duration in minutes)
TIMELINE_TEMPLATES = {
    "wedding_ceremony": [
        ("06:00", "Decor setup begins", "Decorator", 180),
        ("09:00", "Sound check", "DJ Team", 60),
        ("10:00", "Catering setup", "Caterer", 120),
        ("11:00", "Groom arrival", "Coordinator", 30),
        ("11:30", "Baraat procession", "Coordinator", 60),
        ("12:30", "Wedding ceremony", "Pandit", 90),
        ("14:00", "Lunch service", "Caterer", 120),
        ("16:00", "Afternoon break", "Coordinator", 120),
        ("18:00", "Reception setup", "Decorator", 90),
        ("19:30", "Couple entry", "Anchor", 30),
        ("20:00", "Dinner service", "Caterer", 120),
    ],
    "reception": [
        ("16:00", "Venue preparation", "Decorator", 120),
        ("18:00", "Sound & lighting check", "DJ Team", 60),
        ("19:00", "Guest arrival begins", "Coordinator", 60),
        ("19:30", "Couple entry", "Anchor", 30),
        ("20:00", "Welcome speech", "Anchor", 15),
        ("20:15", "First dance", "DJ Team", 15),
        ("20:30", "Dinner service", "Caterer", 90),
        ("22:00", "DJ set & dancing", "DJ Team", 120),
        ("00:00", "Event wrap-up", "Coordinator", 60),
    ],
    "sangeet": [
        ("16:00", "Venue & stage setup", "Decorator", 180),
        ("18:00", "Sound check & AV setup", "DJ Team", 60),
        ("19:00", "Guest arrival", "Coordinator", 60),
        ("19:30", "Welcome drinks", "Caterer", 30),
        ("20:00", "Dance performances begin", "Choreographer", 90),
        ("21:30", "Dinner", "Caterer", 60),
        ("22:30", "Open dancing", "DJ Team", 90),
    ],
    "mehendi": [
        ("10:00", "Venue setup", "Decorator", 120),
        ("12:00", "Mehendi artists arrive", "Mehendi Team", 30),
        ("12:30", "Guest arrival & mehendi begins", "Coordinator", 240),
        ("14:00", "Lunch service", "Caterer", 120),
        ("16:30", "Bride's mehendi session", "Mehendi Team", 180),
        ("19:30", "Evening snacks & music", "Caterer", 90),
    ],
    "haldi": [
        ("08:00", "Venue setup", "Decorator", 60),
        ("09:00", "Haldi ceremony begins", "Coordinator", 120),
        ("11:00", "Brunch service", "Caterer", 90),
        ("12:30", "Photo session", "Photographer", 60),
        ("13:30", "Wrap-up", "Coordinator", 30),
    ],
}


def template_names() -> list[str]:
    return list(TIMELINE_TEMPLATES)
