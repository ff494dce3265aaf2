"""Built-in event fixture loaded when no CATALOG_PATH is configured."""

DEFAULT_EVENTS: list[dict] = [
    {
        "name": "Chelsea vs Arsenal",
        "date": "2025-02-15",
        "venue": "Stamford Bridge",
        "kickoff_time": "15:00",
        "category": "Premier League",
        "ticket_prices": {"Standard": "60.00", "Premium": "120.00"},
        "seat_prefix": "A",
        "capacity": 50,
        "aliases": ["chelsea v arsenal", "chelsea arsenal"],
        "alternative_dates": ["2025-05-10", "2025-08-22"],
    },
    {
        "name": "Manchester United vs Liverpool",
        "date": "2025-03-12",
        "venue": "Old Trafford",
        "kickoff_time": "17:30",
        "category": "Premier League",
        "ticket_prices": {"Standard": "70.00", "Premium": "150.00"},
        "seat_prefix": "B",
        "capacity": 35,
        "aliases": ["man utd vs liverpool", "man united vs liverpool", "united vs liverpool"],
        "alternative_dates": ["2025-04-15", "2025-07-30"],
    },
    {
        "name": "Arsenal vs Tottenham",
        "date": "2025-04-05",
        "venue": "Emirates Stadium",
        "kickoff_time": "12:30",
        "category": "Premier League",
        "ticket_prices": {"Standard": "65.00", "Premium": "130.00"},
        "seat_prefix": "C",
        "capacity": 40,
        "aliases": ["arsenal vs spurs", "north london derby"],
        "alternative_dates": [],
    },
    {
        "name": "Manchester City vs Chelsea",
        "date": "2025-03-22",
        "venue": "Etihad Stadium",
        "kickoff_time": "14:00",
        "category": "Premier League",
        "ticket_prices": {"Standard": "68.00", "Premium": "140.00"},
        "seat_prefix": "D",
        "capacity": 45,
        "aliases": ["man city vs chelsea", "city vs chelsea"],
        "alternative_dates": [],
    },
]
