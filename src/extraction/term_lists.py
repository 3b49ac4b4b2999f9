"""
Static term tables used by the company validator and the heuristic extractor.

Every list of "this is not a company" terms lives here, keyed by category,
and is compiled once at import. Each category has a match mode:

- ``word``: the term appears as a whole word or phrase (case-insensitive)
- ``exact``: the whole candidate equals the term (case-insensitive)

Names on the allow-list (``KNOWN_COMPANIES`` and ``COMPANY_ALIASES``) are
exempt from the block-lists; several tables overlap (e.g. "LinkedIn" is both
a technology term and a company).
"""

import re
from typing import Dict, Iterable, List, Pattern, Tuple


# ===== Allow-list =====

KNOWN_COMPANIES: Tuple[str, ...] = (
    # Verified companies
    "Microsoft", "Google", "Amazon", "Apple", "Facebook", "Meta", "IBM", "Oracle",
    "Spotify", "Klarna", "Ericsson", "Volvo", "IKEA", "Northvolt", "H&M",
    "SAP", "Salesforce", "Adobe", "Autodesk", "Cisco", "Dell", "HP", "Intel",
    "AMD", "NVIDIA", "Tesla", "Uber", "Lyft", "Airbnb", "Twitter", "LinkedIn",
    "Slack", "Zoom", "Shopify", "Squarespace", "Wix", "Atlassian", "Jira",
    "GitHub", "GitLab", "BitBucket", "MongoDB", "MySQL", "PostgreSQL", "Redis",
    "Elastic", "Confluent", "Databricks", "Snowflake", "Looker", "Tableau", "Power BI",
    "SAS", "SPSS", "RStudio", "Anaconda", "Jupyter", "Docker", "Kubernetes",
    "VMware", "Citrix", "Red Hat", "SUSE", "Ubuntu", "Canonical", "CentOS",
    "Fedora", "Debian", "Alpine", "Arch", "Gentoo", "FreeBSD", "OpenBSD",
    "NetBSD", "Solaris", "AIX", "HPUX", "z/OS", "AS/400", "Windows", "macOS",
    "iOS", "Android", "Chrome OS", "Firefox OS", "Ubuntu Touch", "Tizen",
    "WebOS", "Amazon Fire OS", "Roku OS", "tvOS", "watchOS", "Wear OS",
    "HarmonyOS", "EMUI", "MIUI", "One UI", "OxygenOS", "ColorOS", "Huawei",
    "Xiaomi", "Samsung", "Sony", "LG", "Motorola", "Nokia", "HTC", "OnePlus",
    "Oppo", "Vivo", "Realme", "ASUS", "Acer", "Lenovo", "ThinkPad", "Dell XPS",
    "HP Envy", "Microsoft Surface", "MacBook", "iMac", "Mac mini", "Mac Pro",
    "iPad", "iPhone", "Apple Watch", "AirPods", "Galaxy S", "Galaxy Note",
    "Galaxy Tab", "Galaxy Watch", "Galaxy Buds", "Pixel", "Pixel Buds",
    "Nexus", "Chromecast", "Apple TV", "Fire TV", "Roku", "Shield TV",
    "Xbox", "PlayStation", "Nintendo", "Steam", "Epic Games", "Ubisoft",
    "EA", "Activision Blizzard", "Riot Games", "Valve", "BioWare", "Bethesda",
    "Rockstar Games", "CD Projekt Red", "Square Enix", "Capcom", "Konami",
    "SEGA", "Bandai Namco", "TSMC", "ARM",
    "Qualcomm", "Broadcom", "MediaTek", "Foxconn", "LG Display", "Samsung Display",
    "BOE", "AU Optronics", "Sharp", "Panasonic", "Toshiba", "Hitachi", "Fujitsu",
    "Sinch", "Verified Global",
    # Companies seen in Nordic candidate searches
    "ABB", "Siemens", "General Electric", "GE", "Telia", "Telenor", "Tele2", "3M",
    "Netflix", "Zalando", "BMW", "Mercedes", "Audi", "Volkswagen", "Toyota",
    "Honda", "Ford", "Chevrolet", "GM", "Shell", "BP", "Equinor", "Aker", "DNB", "SEB",
    "Nordea", "KPMG", "EY", "PwC", "Deloitte", "McKinsey", "BCG", "Accenture", "Capgemini",
    "TCS", "Infosys", "Wipro", "Cognizant", "HCL", "Tech Mahindra", "CGI",
    "NEC", "Mitsubishi", "Philips", "Bosch", "Schneider Electric",
    "Schneider", "Honeywell", "Johnson Controls", "Schlumberger", "Sotera", "RiksTV",
    "Enhanced Drilling", "Fluke", "Pumpeteknikk", "Morrow Batteries", "Planet", "Novenco Marine",
    "Chromalox", "Scanjet", "Caldic", "Tandberg Television", "Kahoot", "Böhler Welding",
    "Wilhelmsen Ships", "Bama", "Nippon Gases", "Radiocrafts", "Dynea", "Digiprom", "Coromatic",
    "Melbye", "Convene", "Dell Technologies", "Telenor Linx", "Varnish Software",
    "Hanwha Vision", "Opera", "NRK", "Nemko", "TD SYNNEX", "GEA", "Siemens Energy",
    "The Well", "Emerson", "CARLZENT", "Mooring", "SF Solution",
    # Canonical targets of COMPANY_ALIASES
    "Amazon Web Services", "OpenText", "Canon", "Ignyto", "Commvault",
    "Bentley Systems", "Multisoft", "Madison Square Garden Sports",
)

# Known spellings mapped to a canonical company name
COMPANY_ALIASES: Dict[str, str] = {
    "Microsoft Sweden": "Microsoft",
    "Google Sweden": "Google",
    "Amazon Sweden": "Amazon",
    "IBM Sweden": "IBM",
    "Oracle Sweden": "Oracle",
    "Oracle and": "Oracle",
    "Amazon Web": "Amazon Web Services",
    "AWS": "Amazon Web Services",
    "Canon EMEA": "Canon",
    "Ignyto: Platinum Salesforce": "Ignyto",
    "Multisoft AB": "Multisoft",
    "Madison Square Garden Sports Corp": "Madison Square Garden Sports",
    "Verified Global AB": "Verified Global",
    "Hennes & Mauritz": "H&M",
}

# Short names that are real companies despite their length
WELL_KNOWN_SHORT_NAMES: Tuple[str, ...] = (
    "IBM", "SAP", "HP", "ABB", "BMW", "KFC", "CNN", "BBC", "CBS", "H&M",
    "LG", "3M", "SNS", "AXA", "UBS", "RBC", "SEB", "BNP", "EY", "PWC",
    "GE", "GM",
)

# Stripped from the end of a company name, most specific first
CORPORATE_SUFFIX_PATTERNS: Tuple[str, ...] = (
    r"\s+ltd\.?$",
    r"\s+limited$",
    r"\s+inc\.?$",
    r"\s+llc\.?$",
    r"\s+plc\.?$",
    r"\s+ab\s+\(publ\)$",
    r"\s+ab$",
    r"\s+asa$",
    r"\s+as$",
    r"\s+a/s$",
    r"\s+oy(?:j)?$",
    r"\s+b\.?v\.?$",
    r"\s+gmbh$",
    r"\s+s\.?p\.?a\.?$",
    r"\s+a\.?g\.?$",
    r"\s+s\.?a\.?$",
    r"\s+corp\.?$",
    r"\s+corporation$",
    r"\s+group$",
)


# ===== Block-lists =====

LOCATIONS: Tuple[str, ...] = (
    "Stockholm", "Göteborg", "Gothenburg", "Malmö", "Uppsala", "Västerås",
    "Örebro", "Linköping", "Helsingborg", "Jönköping", "Norrköping", "Lund",
    "Umeå", "Gävle", "Borås", "Sundsvall", "Eskilstuna", "Södertälje",
    "Karlstad", "Växjö", "Luleå", "Östersund", "Borlänge", "Falun",
    "Sweden", "Sverige", "Norge", "Norway", "Denmark", "Danmark", "Finland",
    "Iceland", "Oslo", "Bergen", "Trondheim", "Copenhagen", "København", "Aarhus",
    "Helsinki", "Reykjavik", "Europe", "Europa",
    "Nordic", "Nordics", "Norden", "Scandinavia", "Skandinavien",
    "Remote", "Distans", "Remotely", "Anywhere", "Virtual", "Global", "Regional", "Local",
    "International", "Nationwide", "Worldwide", "US", "USA", "UK", "London", "Berlin",
    "Paris", "Amsterdam", "Brussels", "Madrid", "Rome", "Milan", "Frankfurt", "Munich",
    "Vienna", "Zürich", "Zurich", "Geneva", "Luxembourg", "Dublin", "Stockholm County",
    "Stockholms län", "Stockholmsområdet", "Greater Stockholm", "Area", "Region", "Greater",
    "County", "Län", "Kommun", "Municipality", "EMEA", "DACH", "APAC",
)

# Generic words that show up in the company slot of titles and snippets
GENERIC_TERMS: Tuple[str, ...] = (
    # Placeholders and filler
    "not available", "n/a", "none", "null", "undefined", "unknown", "-", "...",
    "no company", "no information", "tbd", "pending", "freelance", "self-employed",
    "end", "start", "begin", "head", "bottom", "top", "introduction", "summary",
    "conclusion", "free", "gratis", "over", "under", "using", "uses", "part",
    "nothing", "information", "info", "search", "sök", "homepage", "website",
    "official", "page", "sida", "easy", "efficient", "opps", "suppling",
    "proffselger", "ilmoita", "interim", "showtagtv", "wheelme", "sjømat", "sjömat",
    # Pronouns
    "you", "they", "we", "us", "me", "my", "your", "their", "i",
    # LinkedIn profile components
    "linkedin", "profile", "profil", "experience", "erfaring", "erfarenhet",
    "experiencia", "expérience", "education", "utdanning", "utbildning", "formation",
    "skills", "recommendations", "accomplishments", "interests", "publications",
    "certifications", "volunteer", "courses", "projects", "languages", "organizations",
    "patents", "test scores", "connections", "following", "activity", "contact info",
    "details", "background",
    # Job descriptors
    "title", "job title", "role", "position", "occupation", "profession", "employment",
    "work", "working", "job", "jobs", "jobb", "work history", "career", "job description",
    "responsibilities", "duties", "assignment", "uppdrag", "project", "projekt",
    # Places and work modes
    "location", "place", "sted", "plats", "address", "city", "country", "region", "area",
    "district", "territory", "zone", "locality", "site", "headquarters", "hq", "office",
    "branch", "remote", "hybrid", "onsite", "work from home", "wfh", "remote work",
    # Temporal terms
    "currently", "previously", "formerly", "past", "present", "now", "then",
    "current", "former", "ex", "previous", "recent", "latest", "last", "next",
    "years", "months", "year", "month", "år", "månader", "sedan", "ago",
    # Seniority and role prefixes
    "senior", "junior", "lead", "chief", "head of", "director of", "manager of",
    "specialist in", "expert in", "professional in", "certified", "licensed",
    "sr", "jr", "sme", "executive", "responsible for", "focusing on", "working with",
    "regional", "national", "international", "global", "professional", "technical",
    # Descriptive phrases
    "years of experience", "with experience in", "specializes in", "expert at",
    "driving innovation", "creating value", "delivering solutions", "passionate about",
    "dedicated to", "committed to", "results-oriented", "goal-driven",
    "customer-focused", "solution-oriented",
    # Organisational units
    "department", "avdelning", "team", "group", "division", "enhet", "unit",
    # Industries and functions
    "digital", "analytics", "marketing", "marknadsföring", "sales", "försäljning",
    "finance", "finans", "accounting", "legal", "hr", "human resources", "it",
    "information technology", "engineering", "design", "product", "produkt",
    "program", "portfolio", "operations", "logistics", "logistik", "supply chain",
    "procurement", "purchasing", "manufacturing", "production", "quality", "compliance",
    "regulatory", "safety", "security", "health", "healthcare", "medical", "pharma",
    "pharmaceutical", "biotech", "biotechnology", "research", "development", "r&d",
    "innovation", "strategy", "strategic", "planning", "business", "management",
    "administration", "leadership", "customer", "client", "service", "services",
    "tjänst", "support", "success", "account", "relationship", "communication", "media",
    "social media", "content", "creative", "brand", "social", "online", "web", "mobile",
    "software", "hardware", "network", "infrastructure", "cloud", "data", "database",
    "ai", "artificial intelligence", "ml", "machine learning", "nl", "natural language",
    "cv", "computer vision", "iot", "internet of things", "blockchain", "crypto",
    "cryptocurrency", "fintech", "foodtech", "cleantech", "technology", "tech",
    "telecom", "telekom", "telecommunications", "television", "nutrition", "solution",
    "solutions", "platform", "plattform", "internet", "gaming", "gdpr", "b2b", "b2c",
    "ux", "ui", "distribution", "transport", "bank", "banking", "automotive",
    "retail", "ecommerce", "e-commerce", "e-handel", "hospitality", "travel", "tourism",
    "food", "beverage", "restaurant", "hotel", "training", "teaching", "consulting",
    "konsulting", "consultancy", "advisory", "analyst", "insights", "reporting", "bi",
    "business intelligence", "real estate", "property", "construction", "architecture",
    "interior", "exterior", "landscape", "urban", "civil", "mechanical", "electrical",
    "chemical", "environmental", "sustainability", "green", "renewable", "energy",
    "oil", "gas", "petroleum", "mining", "metals", "materials", "aerospace",
    "aviation", "transportation", "shipping", "freight", "import", "export",
    "local", "government", "public", "private", "ngo", "non-profit", "charity",
    "foundation", "organization", "organisation", "cybersecurity", "saas",
    "software as a service", "paas", "platform as a service", "iaas",
    "infrastructure as a service", "devops", "devsecops", "agile", "scrum",
    "kanban", "waterfall", "lean", "six sigma", "project management",
    "program management", "portfolio management", "change management",
    "knowledge management", "crm", "customer relationship management", "erp",
    "enterprise resource planning", "hcm", "human capital management", "scm",
    "supply chain management", "plm", "product lifecycle management",
    # Scandinavian profile words
    "stilling", "ansatt", "ansattelse", "deltid", "nåværende", "tidligere",
    "kompetanse", "ferdigheter", "språk", "arbeidserfaring", "prosjekt", "prosjekter",
    "ansvar", "lederansvar", "fagområde", "faglig", "samarbeid", "anställning",
    "nuvarande", "kompetens", "färdigheter", "arbetslivserfarenhet", "ledarskap",
    "område", "samarbete", "ansat", "uddannelse", "nuværende", "kompetencer",
    "færdigheder", "projekter", "ledelse", "samarbejde", "det", "don", "de",
)

INDUSTRY_TERMS: Tuple[str, ...] = (
    "Technology", "Teknologi", "Software", "IT", "Tech", "Hardware",
    "Cybersecurity", "Security", "Säkerhet", "Finance", "Financial", "Banking",
    "Finans", "Healthcare", "Sjukvård", "Education", "Utbildning",
    "Retail", "Detaljhandel", "Manufacturing", "Tillverkning", "Marketing",
    "Marknadsföring", "Sales", "Försäljning", "Consulting", "Konsulting",
    "Legal", "Juridik", "Telecommunications", "Telekom", "Automotive", "Fordon",
    "Pharmaceutical", "Läkemedel", "Insurance", "Försäkring", "Energy", "Energi",
    "Consumer Goods", "Konsumentvaror", "Media", "Entertainment", "Underhållning",
    "Logistics", "Logistik", "Transport", "Aerospace", "Flyg", "Agriculture",
    "Jordbruk", "Construction", "Bygg", "Defence", "Försvar", "Hospitality",
    "Restaurang", "Hotel", "Hotell", "Electronics", "Elektronik", "Gaming", "Spel",
    "Food", "Mat", "Beverage", "Dryck", "Dryckes", "University", "Universitet",
    "School", "Skola", "College", "Institute", "Institut", "Academy", "Akademi",
    "Department", "Avdelning", "HR", "Human Resources", "Ekonomi", "Economics",
    "Research", "Forskning", "Development", "Utveckling", "R&D", "RnD", "FoU",
    "Customer Experience", "Kundupplevelse", "Customer Service", "Kundtjänst",
    "Project", "Projekt", "Product", "Produkt", "Experience", "Erfaring", "Erfarenhet",
    "Clients", "Kunder", "SMEs", "SMB", "Enterprise", "Account", "Success", "Regional",
    "Territory", "Compliance", "Responsibility", "Management", "Digital", "Nordic",
    "Scandinavia", "Professional", "Services", "Area", "Region", "District", "Global",
    "Gymnasium", "Högskola", "KTH",
)

MARKET_DESCRIPTIONS: Tuple[str, ...] = (
    "international markets", "global markets", "domestic markets", "european markets",
    "nordic markets", "emerging markets", "financial markets", "capital markets",
    "global consumer markets", "international market", "enterprise market",
    "corporate market", "b2b market", "b2c market", "market", "markets",
    "market development", "market expansion", "market leader", "various markets",
    "select markets",
)

# Strong job-title words; a company name containing one is a title
JOB_TITLE_WORDS: Tuple[str, ...] = (
    "manager", "managers", "director", "executive", "president", "vice president", "vp",
    "founder", "co-founder", "cofounder", "owner", "ceo", "cto", "cfo", "coo", "cio", "cmo",
    "chief", "head of", "lead", "leader", "specialist", "consultant", "analyst",
    "engineer", "developer", "designer", "architect", "officer", "coordinator",
    "administrator", "assistant", "advisor", "adviser", "strategist", "recruiter",
    "representative", "intern", "trainee", "student", "praktikant", "controller",
    "coach", "sr", "jr", "senior", "junior", "principal",
    # Swedish and Norwegian titles
    "projektledare", "försäljningschef", "marknadschef", "ekonomichef", "personalchef",
    "säljchef", "chef", "ledare", "ansvarig", "konsult", "tekniker", "servicetekniker",
    "ingenjör", "säljare", "utvecklare", "assistent", "affärsutvecklare", "vd",
    "koordinator", "samordnare", "utredare", "grundare", "daglig leder", "selger",
)

# Words that are a job title only when they are the whole candidate
JOB_TITLE_EXACT: Tuple[str, ...] = (
    "Partner", "Associate", "Account", "Success", "Regional", "Enterprise",
    "Nordic", "Territory", "Sales", "Technical", "Responsibility", "Experience",
    "Erfaring", "Erfarenhet", "Advisor", "Owner", "Intern",
)

TECHNOLOGY_TERMS: Tuple[str, ...] = (
    "HTML", "CSS", "JavaScript", "React", "Angular", "Vue", "Node.js",
    "Docker", "Kubernetes", "AWS", "Azure", "GCP", "Git", "GitHub",
    "Salesforce", "SQL", "NoSQL", "MongoDB", "PostgreSQL", "MySQL",
    "Redis", "Kafka", "RabbitMQ", "REST", "GraphQL", "API", "JSON",
    "XML", "YAML", "TOML", "NGINX", "Apache", "Linux", "Unix", "Windows",
    "macOS", "iOS", "Android", "Python", "Java", "C++", "C#", "PHP",
    "Ruby", "Go", "Rust", "Swift", "Kotlin", "TypeScript", "Dart",
    "Flutter", "TensorFlow", "PyTorch", "Pandas", "NumPy", "Matplotlib",
    "Scikit-learn", "Jupyter", "VS Code", "IntelliJ", "Eclipse", "Xcode",
    "Android Studio", "Photoshop", "Illustrator", "Figma", "Sketch",
    "Adobe XD", "Premiere Pro", "After Effects", "Blender", "Unity",
    "Unreal Engine", "Jira", "Confluence", "Trello", "Asana", "Notion",
    "Slack", "Teams", "Zoom", "Meet", "WebEx", "Excel", "Word", "PowerPoint",
    "Outlook", "SharePoint", "OneDrive", "Google Drive", "Sheets", "Docs",
    "Slides", "Gmail", "Analytics", "Tag Manager", "Search Console",
    "Ads", "Facebook", "Instagram", "Twitter", "LinkedIn", "YouTube",
    "TikTok", "Pinterest", "Snapchat", "WhatsApp", "Messenger",
    "Stripe", "PayPal", "Square", "Shopify", "Magento", "WooCommerce",
    "WordPress", "Drupal", "Joomla", "Webflow", "Wix", "Squarespace",
    "Bootstrap", "Tailwind CSS", "Material UI", "Ant Design", "jQuery",
    "Axios", "Fetch", "WebSocket", "SSE", "PWA", "SPA", "MPA", "SSR",
    "CSR", "SSG", "ISR", "JWT", "OAuth", "SAML", "OpenID", "LDAP",
    "Active Directory", "SSL", "TLS", "HTTPS", "HTTP", "SMTP", "IMAP",
    "POP3", "FTP", "SFTP", "SSH", "TCP", "UDP", "IP", "DNS", "CDN",
    "Load Balancer", "Proxy", "VPN", "VPC", "Subnet", "CIDR", "IPv4",
    "IPv6", "BGP", "OSPF", "EIGRP", "MPLS", "VoIP", "SIP", "RTP",
    "WebRTC", "JAMstack", "MERN", "MEAN", "LAMP", "LEMP",
    "DevOps", "GitOps", "MLOps", "AIOps", "ChatOps", "NoOps", "SRE",
    "CI/CD", "IaC", "Terraform", "Ansible", "Chef", "Puppet", "CloudFormation",
    "ARM Templates", "Bicep", "Pulumi", "Helm", "Prometheus", "Grafana",
    "ELK", "Splunk", "Datadog", "New Relic", "AppDynamics", "Dynatrace",
)

SINGLE_WORD_NON_COMPANIES: Tuple[str, ...] = (
    "int", "cash", "global", "as", "same", "nordics", "research", "partner", "route",
    "fredrik", "an", "the", "weave", "deel", "mentor", "spce", "prenax", "saas", "sinch",
    "dry", "cargo", "shipbrokers", "region", "south", "strategic", "partners", "efficy",
    "international", "markets", "market", "worldwide", "domestic", "enterprise", "corporate",
)

FILTERED_PHRASES: Tuple[str, ...] = (
    "linkedin", "erfarenhet", "over", "managed", "business development manager",
    "account executive", "sales manager", "research skills", "new business", "our",
    "key accounts", "client portfolio", "money in the bank", "via strategic partners",
    "in region south", "efficy crm", "international markets", "international market",
    "global markets", "nordic markets", "european markets",
)

BLOCK_LISTS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "location": ("word", LOCATIONS),
    "generic": ("word", GENERIC_TERMS),
    "industry": ("word", INDUSTRY_TERMS),
    "market": ("word", MARKET_DESCRIPTIONS),
    "job_title": ("word", JOB_TITLE_WORDS),
    "job_title_exact": ("exact", JOB_TITLE_EXACT),
    "filtered": ("word", FILTERED_PHRASES),
    "technology": ("exact", TECHNOLOGY_TERMS),
    "single_word": ("exact", SINGLE_WORD_NON_COMPANIES),
}


# ===== Sentence-like patterns =====

SENTENCE_PATTERNS: Tuple[Tuple[str, str], ...] = (
    # Time periods and dates
    ("time_period", r"^\d{1,4}\s*[-–]\s*(?:present|now|\d{4})$"),
    ("time_period", r"^\d+\s+months?\.?$"),
    ("date", r"^(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{4}"),
    # Places and institutions
    ("location", r"^(?:stockholm|göteborg|malmö|uppsala|linköping),?\s+(?:area|region|län|municipality|kommun|county)$"),
    ("institution", r"^(?:stockholm|uppsala)\s+(?:university|school|college)"),
    ("institution", r"^(?:university|school|college)\s+of\b"),
    # Employment types and LinkedIn boilerplate
    ("employment", r"^(?:full-time|part-time|contractor|consultant|freelancer|internship|employment|experience)"),
    ("boilerplate", r"^(?:profile|page|update|post|experience|education|certification|language|skill)s?$"),
    # Descriptions of work
    ("description", r"\b(?:experience|managing|extensive|selling to|deliver(?:s|ed|ing)?|uncovering|driving|developing|supporting)\b"),
    ("description", r"\b(?:responsibility|responsible|ansvar|for|compliance|with|easy|efficient|management)\b"),
    ("description", r"\b(?:sales|selling)\s+(?:via|through|by|to|in|at)\b"),
    ("department", r"\b(?:teams?|sales team|department|inside sales|emea sales|client acquisition)\b"),
    ("industry", r"\b(?:global (?:players|fashion)|various multinational players|media and fashion|fashion industries)\b"),
    ("action", r"\b(?:organized racks|algorithmic monitoring|enables|evaluate|outbound activities)\b"),
    ("job_title", r"\b(?:sr|senior|jr|junior)\s+\w+\s+(?:manager|engineer|director|specialist|consultant|executive)\b"),
    ("acronym", r"^(?:saas|gdpr|it|b2b|b2c|ai|ml|iot|ux|ui)$"),
    # Market phrases
    ("market", r"^(?:international|global|domestic|european|nordic)\s+markets?$"),
    ("market", r"^.*\s+market(?:s|\s+development|\s+expansion|\s+leader)?$"),
    ("phrase", r"\b(?:saas dry cargo|dry cargo shipbrokers|sales via strategic|strategic partners|region south|efficy crm)\b"),
    # Ends mid-sentence
    ("trailing_preposition", r"\s(?:and|of|in|via|to|as|that|the|at|for|with)$"),
)


# ===== Extractor vocabulary =====

# Prepositions that introduce the employer in a title ("CTO at Spotify")
TITLE_PREPOSITIONS: Tuple[str, ...] = ("at", "@", "på", "hos", "för", "with", "i")

SNIPPET_PREPOSITIONS: Dict[str, Tuple[str, ...]] = {
    "sv": ("på", "hos", "vid", "med", "at"),
    "en": ("at", "with", "for"),
}

# Swedish function words; two or more hits mark a Swedish snippet
SWEDISH_MARKERS: Tuple[str, ...] = (
    "och", "på", "för", "med", "att", "är", "eller", "av", "till", "har",
)

# Words suggesting a segment names an organisation
COMPANY_INDICATORS: Tuple[str, ...] = (
    "technologies", "technology", "tech", "software", "solutions", "consulting",
    "services", "agency", "corporation", "group", "ab", "inc", "ltd", "llc", "gmbh",
    "company", "limited", "partners", "associates", "systems", "enterprises",
    "industries", "network", "media", "asa", "oy", "plc",
)

# Standard spellings for common titles, checked in order
TITLE_STANDARDIZATION: Tuple[Tuple[str, str], ...] = (
    (r"\baccount\s+executive\b", "Account Executive"),
    (r"\bregional\s+sales\s+manager\b", "Regional Sales Manager"),
    (r"\bkey\s+account\s+manager\b", "Key Account Manager"),
    (r"\bbusiness\s+development\s+manager\b", "Business Development Manager"),
    (r"\bsales\s+manager\b", "Sales Manager"),
    (r"\bsales\s+rep(?:resentative)?\b", "Sales Representative"),
    (r"\bproduct\s+manager\b", "Product Manager"),
    (r"\bproject\s+manager\b", "Project Manager"),
    (r"\bsoftware\s+engineer\b", "Software Engineer"),
    (r"\baccount\s+manager\b", "Account Manager"),
    (r"\bceo\b", "CEO"),
    (r"\bcto\b", "CTO"),
    (r"\bcfo\b", "CFO"),
    (r"\bcoo\b", "COO"),
    (r"\bvd\b", "VD"),
    (r"\bsäljchef\b", "Säljchef"),
)


def compile_terms(terms: Iterable[str], mode: str) -> Pattern:
    """
    Compile a term list into one case-insensitive regex.

    ``word`` mode matches a term bounded by non-word characters on both
    sides; ``exact`` mode matches the whole string.
    """
    escaped = sorted({re.escape(term.lower()) for term in terms}, key=len, reverse=True)
    alternation = "|".join(escaped)
    if mode == "exact":
        return re.compile(rf"^(?:{alternation})$", re.IGNORECASE)
    if mode == "word":
        return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)
    raise ValueError(f"Unknown match mode: {mode}")


def _canonical_index(names: Iterable[str]) -> Dict[str, str]:
    index: Dict[str, str] = {}
    for name in names:
        index.setdefault(name.lower(), name)
    return index


# Compiled once, shared by every validator and extractor
COMPILED_BLOCK_LISTS: Dict[str, Pattern] = {
    category: compile_terms(terms, mode) for category, (mode, terms) in BLOCK_LISTS.items()
}
COMPILED_SENTENCE_PATTERNS: List[Tuple[str, Pattern]] = [
    (reason, re.compile(pattern, re.IGNORECASE)) for reason, pattern in SENTENCE_PATTERNS
]
COMPILED_SUFFIXES: List[Pattern] = [
    re.compile(pattern, re.IGNORECASE) for pattern in CORPORATE_SUFFIX_PATTERNS
]
CANONICAL_COMPANIES: Dict[str, str] = _canonical_index(KNOWN_COMPANIES)
CANONICAL_ALIASES: Dict[str, str] = {alias.lower(): name for alias, name in COMPANY_ALIASES.items()}
SHORT_NAMES = frozenset(name.upper() for name in WELL_KNOWN_SHORT_NAMES)

JOB_TITLE_PATTERN = COMPILED_BLOCK_LISTS["job_title"]
JOB_TITLE_EXACT_PATTERN = COMPILED_BLOCK_LISTS["job_title_exact"]
LOCATION_PATTERN = COMPILED_BLOCK_LISTS["location"]
COMPANY_INDICATOR_PATTERN = compile_terms(COMPANY_INDICATORS, "word")
