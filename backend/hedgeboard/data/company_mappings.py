"""
Company-to-ticker dictionary used to match prediction-market events to stocks.

Each entry lists the company's aliases, products and executives. Names under
``exact_only`` are generic English words (or collide with other products) and
are checked first, with word boundaries enforced.
"""

COMPANY_MAPPINGS = {
    # Mega Cap Tech
    "AAPL": {
        "ticker": "AAPL",
        "names": [
            "Apple", "iPhone", "iPad", "MacBook", "Apple Watch", "AirPods", "Vision Pro",
            "Tim Cook", "App Store", "iOS", "macOS", "Apple TV", "Apple Music", "iCloud",
            "Siri", "Apple Silicon", "M1", "M2", "M3", "M4",
        ],
    },
    "MSFT": {
        "ticker": "MSFT",
        "names": [
            "Microsoft", "Azure", "Windows", "Satya Nadella", "Xbox", "Office 365",
            "LinkedIn", "GitHub", "Bing", "Copilot", "Surface", "Activision",
        ],
        # "Teams" alone is usually sports
        "exact_only": ["Microsoft Teams"],
    },
    "GOOGL": {
        "ticker": "GOOGL",
        "names": [
            "Google", "Alphabet", "YouTube", "Sundar Pichai", "Android", "Chrome",
            "Pixel", "Waymo", "DeepMind", "Google Cloud", "Gmail", "Google Maps",
            "Google Search", "Bard", "Google Play",
        ],
        # "Gemini" alone is also a crypto exchange
        "exact_only": ["Google Gemini"],
    },
    "META": {
        "ticker": "META",
        "names": [
            "Facebook", "Instagram", "WhatsApp", "Mark Zuckerberg", "Zuckerberg",
            "Threads", "Oculus", "Quest", "Reality Labs", "Messenger", "Metaverse",
        ],
        "exact_only": ["Meta"],
    },
    "AMZN": {
        "ticker": "AMZN",
        "names": [
            "Amazon", "AWS", "Jeff Bezos", "Andy Jassy", "Alexa", "Echo",
            "Kindle", "Whole Foods", "Amazon Web Services", "Ring", "Twitch", "MGM",
            "Amazon Prime", "Blue Origin", "Prime Video", "Prime Day",
        ],
        # "Prime" alone could be Prime Minister
        "exact_only": ["Amazon Prime"],
    },

    # AI & Chips
    "NVDA": {
        "ticker": "NVDA",
        "names": [
            "Nvidia", "NVIDIA", "Jensen Huang", "GeForce", "RTX", "CUDA", "A100", "H100",
            "Blackwell", "Grace Hopper", "DGX", "Mellanox",
        ],
    },
    "AMD": {
        "ticker": "AMD",
        "names": ["AMD", "Lisa Su", "Ryzen", "Radeon", "EPYC", "Xilinx", "Instinct", "ROCm"],
    },
    "INTC": {
        "ticker": "INTC",
        "names": ["Pat Gelsinger", "Core i", "Xeon", "Altera", "Mobileye"],
        "exact_only": ["Intel"],
    },
    "ARM": {"ticker": "ARM", "names": ["ARM Holdings", "Arm Holdings", "ARM chips"]},
    "AVGO": {"ticker": "AVGO", "names": ["Broadcom", "VMware"]},
    "QCOM": {"ticker": "QCOM", "names": ["Qualcomm", "Snapdragon"]},
    "TSM": {"ticker": "TSM", "names": ["TSMC", "Taiwan Semiconductor"]},
    "ASML": {"ticker": "ASML", "names": ["ASML"]},
    "MU": {"ticker": "MU", "names": ["Micron"]},

    # Electric Vehicles & Energy
    "TSLA": {
        "ticker": "TSLA",
        "names": [
            "Tesla", "Elon Musk", "Cybertruck", "Model S", "Model 3", "Model X", "Model Y",
            "Supercharger", "Powerwall", "Megapack", "Full Self-Driving", "FSD",
            "Autopilot", "Gigafactory", "SpaceX", "Starlink", "Neuralink", "xAI",
        ],
    },
    "RIVN": {"ticker": "RIVN", "names": ["Rivian", "R1T", "R1S"]},
    "LCID": {"ticker": "LCID", "names": ["Lucid", "Lucid Air", "Lucid Motors"]},
    "NIO": {"ticker": "NIO", "names": ["NIO", "Nio"]},
    "XPEV": {"ticker": "XPEV", "names": ["XPeng", "Xpeng"]},
    "LI": {"ticker": "LI", "names": ["Li Auto"]},
    "FSR": {"ticker": "FSR", "names": ["Fisker"]},
    "F": {
        "ticker": "F",
        "names": ["Ford Motor", "Ford F-150", "Mustang Mach-E", "Jim Farley"],
        "exact_only": ["Ford"],
    },
    "GM": {
        "ticker": "GM",
        "names": ["General Motors", "Chevy", "Chevrolet", "Cadillac", "GMC", "Mary Barra"],
    },

    # Crypto & Fintech
    "COIN": {"ticker": "COIN", "names": ["Coinbase", "Brian Armstrong"]},
    "MSTR": {"ticker": "MSTR", "names": ["MicroStrategy", "Michael Saylor", "Saylor"]},
    "MARA": {"ticker": "MARA", "names": ["Marathon Digital", "Marathon Holdings"]},
    "RIOT": {"ticker": "RIOT", "names": ["Riot Platforms", "Riot Blockchain"]},
    "HOOD": {"ticker": "HOOD", "names": ["Robinhood", "Vlad Tenev"]},
    "SQ": {
        "ticker": "SQ",
        "names": ["Square", "Cash App", "Jack Dorsey"],
        "exact_only": ["Block"],
    },
    "PYPL": {"ticker": "PYPL", "names": ["PayPal", "Venmo"]},
    "AFRM": {"ticker": "AFRM", "names": ["Affirm", "Max Levchin"]},
    "SOFI": {"ticker": "SOFI", "names": ["SoFi", "Social Finance"]},
    "NU": {"ticker": "NU", "names": ["Nubank", "Nu Holdings"]},

    # Social Media & Entertainment
    "NFLX": {"ticker": "NFLX", "names": ["Netflix", "Reed Hastings", "Ted Sarandos"]},
    "DIS": {
        "ticker": "DIS",
        "names": ["Disney", "Bob Iger", "Pixar", "Marvel", "Star Wars", "Hulu", "ESPN", "Disney+"],
    },
    "SNAP": {
        "ticker": "SNAP",
        "names": ["Snapchat", "Evan Spiegel"],
        "exact_only": ["Snap Inc"],
    },
    "TWTR": {"ticker": "TWTR", "names": ["Twitter"]},
    "X": {"ticker": "X", "names": ["X Corp", "Twitter/X"]},
    "PINS": {"ticker": "PINS", "names": ["Pinterest"]},
    "RDDT": {"ticker": "RDDT", "names": ["Reddit"]},
    "SPOT": {"ticker": "SPOT", "names": ["Spotify", "Daniel Ek"]},
    "RBLX": {"ticker": "RBLX", "names": ["Roblox"]},
    "TTWO": {"ticker": "TTWO", "names": ["Take-Two", "Rockstar Games", "GTA", "Grand Theft Auto"]},
    "EA": {"ticker": "EA", "names": ["Electronic Arts", "EA Sports", "FIFA", "Madden"]},
    "ATVI": {"ticker": "ATVI", "names": ["Activision", "Blizzard", "Call of Duty", "World of Warcraft"]},
    "SONY": {"ticker": "SONY", "names": ["Sony", "PlayStation", "PS5"]},

    # Cloud & Enterprise Software
    "CRM": {"ticker": "CRM", "names": ["Salesforce", "Marc Benioff", "Slack"]},
    "ORCL": {
        "ticker": "ORCL",
        "names": ["Larry Ellison", "Oracle Cloud"],
        "exact_only": ["Oracle"],
    },
    "NOW": {"ticker": "NOW", "names": ["ServiceNow"]},
    "SNOW": {"ticker": "SNOW", "names": ["Snowflake"]},
    "DDOG": {"ticker": "DDOG", "names": ["Datadog"]},
    "NET": {"ticker": "NET", "names": ["Cloudflare"]},
    "ZS": {"ticker": "ZS", "names": ["Zscaler"]},
    "CRWD": {"ticker": "CRWD", "names": ["CrowdStrike", "George Kurtz"]},
    "PANW": {"ticker": "PANW", "names": ["Palo Alto Networks"]},
    "OKTA": {"ticker": "OKTA", "names": ["Okta"]},
    "MDB": {"ticker": "MDB", "names": ["MongoDB"]},
    "PLTR": {"ticker": "PLTR", "names": ["Palantir", "Peter Thiel", "Alex Karp"]},
    "ZM": {
        "ticker": "ZM",
        "names": ["Zoom Video", "Eric Yuan"],
        "exact_only": ["Zoom"],
    },
    "DOCU": {"ticker": "DOCU", "names": ["DocuSign"]},
    "TWLO": {"ticker": "TWLO", "names": ["Twilio"]},
    "U": {"ticker": "U", "names": ["Unity Software", "Unity Engine"]},

    # E-Commerce & Retail
    "SHOP": {"ticker": "SHOP", "names": ["Shopify", "Tobi Lutke"]},
    "BABA": {"ticker": "BABA", "names": ["Alibaba", "Jack Ma", "Taobao", "Tmall", "AliExpress"]},
    "JD": {"ticker": "JD", "names": ["JD.com", "JingDong"]},
    "PDD": {"ticker": "PDD", "names": ["Pinduoduo", "Temu"]},
    "MELI": {"ticker": "MELI", "names": ["MercadoLibre", "Mercado Libre"]},
    "SE": {"ticker": "SE", "names": ["Sea Limited", "Shopee", "Garena"]},
    "WMT": {"ticker": "WMT", "names": ["Walmart", "Doug McMillon"]},
    "TGT": {
        "ticker": "TGT",
        "names": ["Target Corporation"],
        "exact_only": ["Target"],
    },
    "COST": {"ticker": "COST", "names": ["Costco"]},
    "HD": {"ticker": "HD", "names": ["Home Depot"]},
    "LOW": {"ticker": "LOW", "names": ["Lowe's", "Lowes"]},
    "ABNB": {"ticker": "ABNB", "names": ["Airbnb", "Brian Chesky"]},
    "BKNG": {"ticker": "BKNG", "names": ["Booking.com", "Booking Holdings", "Priceline"]},
    "UBER": {"ticker": "UBER", "names": ["Uber", "Dara Khosrowshahi", "Uber Eats"]},
    "LYFT": {"ticker": "LYFT", "names": ["Lyft"]},
    "DASH": {"ticker": "DASH", "names": ["DoorDash", "Tony Xu"]},

    # Aerospace & Defense
    "BA": {"ticker": "BA", "names": ["Boeing", "Dave Calhoun", "737 MAX", "787 Dreamliner"]},
    "LMT": {"ticker": "LMT", "names": ["Lockheed Martin", "Lockheed", "F-35", "F-22"]},
    "RTX": {"ticker": "RTX", "names": ["Raytheon", "RTX Corporation", "Pratt & Whitney"]},
    "NOC": {"ticker": "NOC", "names": ["Northrop Grumman", "B-21 Raider"]},
    "GD": {"ticker": "GD", "names": ["General Dynamics", "Gulfstream"]},

    # Finance & Banking
    "JPM": {"ticker": "JPM", "names": ["JPMorgan", "JP Morgan", "Jamie Dimon", "Chase"]},
    "GS": {"ticker": "GS", "names": ["Goldman Sachs", "David Solomon"]},
    "MS": {"ticker": "MS", "names": ["Morgan Stanley", "James Gorman"]},
    "BAC": {"ticker": "BAC", "names": ["Bank of America", "BofA", "Brian Moynihan"]},
    "C": {"ticker": "C", "names": ["Citigroup", "Citi", "Citibank", "Jane Fraser"]},
    "WFC": {"ticker": "WFC", "names": ["Wells Fargo", "Charlie Scharf"]},
    "BRK": {
        "ticker": "BRK.B",
        "names": ["Berkshire Hathaway", "Warren Buffett", "Buffett", "Charlie Munger"],
    },
    "V": {"ticker": "V", "names": ["Visa"]},
    "MA": {"ticker": "MA", "names": ["Mastercard"]},
    "AXP": {"ticker": "AXP", "names": ["American Express", "Amex"]},
    "BLK": {"ticker": "BLK", "names": ["BlackRock", "Larry Fink"]},

    # Healthcare & Pharma
    "PFE": {"ticker": "PFE", "names": ["Pfizer", "Albert Bourla"]},
    "MRNA": {"ticker": "MRNA", "names": ["Moderna", "Stéphane Bancel"]},
    "BNTX": {"ticker": "BNTX", "names": ["BioNTech"]},
    "JNJ": {"ticker": "JNJ", "names": ["Johnson & Johnson", "Johnson and Johnson", "J&J"]},
    "UNH": {"ticker": "UNH", "names": ["UnitedHealth", "United Healthcare"]},
    "LLY": {"ticker": "LLY", "names": ["Eli Lilly", "Mounjaro", "Zepbound"]},
    "NVO": {"ticker": "NVO", "names": ["Novo Nordisk", "Ozempic", "Wegovy"]},
    "ABBV": {"ticker": "ABBV", "names": ["AbbVie", "Humira"]},
    "MRK": {"ticker": "MRK", "names": ["Merck", "Keytruda"]},
    "BMY": {"ticker": "BMY", "names": ["Bristol-Myers Squibb", "Bristol Myers"]},

    # Energy
    "XOM": {"ticker": "XOM", "names": ["Exxon", "ExxonMobil", "Exxon Mobil"]},
    "CVX": {"ticker": "CVX", "names": ["Chevron"]},
    "COP": {"ticker": "COP", "names": ["ConocoPhillips"]},
    "OXY": {"ticker": "OXY", "names": ["Occidental Petroleum", "Occidental"]},
    "SLB": {"ticker": "SLB", "names": ["Schlumberger"]},

    # Consumer Brands
    "KO": {"ticker": "KO", "names": ["Coca-Cola", "Coca Cola", "Coke"]},
    "PEP": {"ticker": "PEP", "names": ["Pepsi", "PepsiCo", "Frito-Lay", "Gatorade"]},
    "NKE": {"ticker": "NKE", "names": ["Nike", "Jordan Brand", "Phil Knight"]},
    "SBUX": {"ticker": "SBUX", "names": ["Starbucks", "Howard Schultz"]},
    "MCD": {"ticker": "MCD", "names": ["McDonald's", "McDonalds", "Big Mac"]},
    "CMG": {"ticker": "CMG", "names": ["Chipotle", "Chipotle Mexican Grill"]},
    "LULU": {"ticker": "LULU", "names": ["Lululemon"]},

    # Telecom
    "T": {"ticker": "T", "names": ["AT&T", "ATT"]},
    "VZ": {"ticker": "VZ", "names": ["Verizon"]},
    "TMUS": {"ticker": "TMUS", "names": ["T-Mobile", "TMobile"]},

    # AI Companies
    "AI": {"ticker": "AI", "names": ["C3.ai", "C3 AI"]},
    "UPST": {"ticker": "UPST", "names": ["Upstart"]},
    "PATH": {"ticker": "PATH", "names": ["UiPath"]},

    # Misc Tech
    "IBM": {"ticker": "IBM", "names": ["IBM", "Arvind Krishna", "Red Hat"]},
    "HPQ": {"ticker": "HPQ", "names": ["HP", "Hewlett-Packard"]},
    "DELL": {"ticker": "DELL", "names": ["Dell", "Michael Dell"]},
    "ROKU": {"ticker": "ROKU", "names": ["Roku", "Anthony Wood"]},

    # China Tech
    "BIDU": {"ticker": "BIDU", "names": ["Baidu", "Robin Li"]},
    "NTES": {"ticker": "NTES", "names": ["NetEase"]},
    "TME": {"ticker": "TME", "names": ["Tencent Music"]},
    "BILI": {"ticker": "BILI", "names": ["Bilibili"]},
    "DIDI": {"ticker": "DIDI", "names": ["DiDi", "Didi Global", "Didi Chuxing"]},

    # Special / Meme Stocks
    "GME": {"ticker": "GME", "names": ["GameStop", "Ryan Cohen", "Roaring Kitty", "Keith Gill"]},
    "AMC": {"ticker": "AMC", "names": ["AMC Entertainment", "Adam Aron", "AMC Theatres"]},
    "BBBY": {"ticker": "BBBY", "names": ["Bed Bath & Beyond", "Bed Bath and Beyond"]},
}


def get_mapping(key: str) -> dict:
    """Look up a mapping by key or by its listed ticker (BRK vs BRK.B)."""
    key = key.upper()
    if key in COMPANY_MAPPINGS:
        return COMPANY_MAPPINGS[key]
    for mapping in COMPANY_MAPPINGS.values():
        if mapping["ticker"] == key:
            return mapping
    return {}
