SUGGESTION_STATES = {"pending", "approved", "rejected", "published"}

# Angles rotated into generation prompts to diversify output
ANGLES = (
    "comprehensive analysis",
    "expert insights",
    "future implications",
    "industry impact",
    "technical deep-dive",
    "market analysis",
)

TITLE_SUFFIXES = ("Insights", "Analysis", "Perspective", "Guide", "Deep Dive", "Update")

PLACEHOLDER_TITLE = "Latest Industry Insights"
PLACEHOLDER_SUMMARY = "Comprehensive analysis of recent developments in the industry"

NEWS_KEYWORDS_BY_CATEGORY = {
    "technology": [
        "AI technology", "machine learning", "blockchain", "cybersecurity",
        "cloud computing", "quantum computing", "robotics", "edge computing",
    ],
    "business": [
        "startup funding", "market trends", "venture capital", "fintech",
        "digital transformation", "e-commerce", "global trade",
    ],
    "health": [
        "medical breakthrough", "healthcare innovation", "mental health",
        "biotechnology", "telemedicine", "public health",
    ],
    "science": [
        "scientific discovery", "space exploration", "climate science",
        "neuroscience", "genetics research", "materials science",
    ],
    "agriculture": [
        "sustainable farming", "agricultural technology", "precision agriculture",
        "vertical farming", "food security",
    ],
    "education": [
        "education technology", "online learning", "higher education",
        "STEM education", "classroom technology",
    ],
    "environment": [
        "renewable energy", "green technology", "climate action",
        "biodiversity", "circular economy", "ocean conservation",
    ],
    "culture": [
        "entertainment news", "music trends", "gaming industry",
        "digital culture", "creative industries",
    ],
    "sports": [
        "sports technology", "esports growth", "sports analytics",
        "sports medicine", "athletic training",
    ],
}

# (title, description, source) per category, used when every news source comes back empty
FALLBACK_TOPICS = {
    "Technology": [
        ("AI Revolution in Software Development", "How AI is transforming coding and development workflows", "Tech News"),
        ("Quantum Computing Breakthroughs", "Latest advances in quantum technology and applications", "Science Today"),
        ("The Rise of Edge Computing", "How processing data closer to the source is changing tech infrastructure", "Tech Insights"),
        ("Augmented Reality in Daily Life", "How AR applications are becoming mainstream tools", "Digital Trends"),
    ],
    "Business": [
        ("Startup Funding Landscape Changes", "New trends in venture capital and startup investments", "Business Weekly"),
        ("Remote Work Revolution Continues", "How remote work is reshaping business operations", "Work Trends"),
        ("Supply Chain Innovations", "New technologies transforming global supply chains", "Business Innovation"),
        ("Sustainable Business Models", "How companies are integrating sustainability into core operations", "Green Business"),
    ],
    "Health": [
        ("Medical AI Breakthrough", "Artificial intelligence revolutionizing healthcare diagnostics", "Health Science"),
        ("Telemedicine Expansion", "How virtual healthcare is becoming the new standard", "Medical Tech"),
        ("Precision Medicine Advances", "Tailoring medical treatments to individual genetic profiles", "Medical Research"),
        ("Wearable Health Monitoring", "How consumer devices are transforming preventive healthcare", "Health Tech"),
    ],
    "Science": [
        ("Space Exploration Milestones", "Recent achievements in space technology and exploration", "Space Today"),
        ("Genetic Engineering Ethics", "Balancing innovation with ethical considerations in genetics", "Science Ethics"),
        ("Neuroscience and Consciousness", "New insights into the nature of human awareness", "Brain Research"),
        ("Materials Science Revolution", "How new materials are enabling technological breakthroughs", "Materials Today"),
    ],
    "Agriculture": [
        ("Vertical Farming Expansion", "How urban agriculture is scaling to feed growing cities", "Future Farming"),
        ("Precision Agriculture Technology", "Using data and automation to optimize crop yields", "Ag Tech Review"),
        ("Soil Health Revolution", "New approaches to maintaining and restoring agricultural soils", "Earth Science"),
        ("Drought-Resistant Crop Development", "Breeding and engineering plants for climate resilience", "Crop Science"),
    ],
    "Education": [
        ("Online Learning Revolution", "How digital education is transforming learning", "Education Today"),
        ("AI Tutors in Education", "Personalized learning through artificial intelligence", "EdTech Review"),
        ("Global Education Access", "Bridging educational divides through technology", "Global Learning"),
        ("Skills-Based Education Models", "Moving beyond traditional degrees to competency-based learning", "Future Skills"),
    ],
    "Environment": [
        ("Climate Change Solutions", "Innovative approaches to environmental challenges", "Environmental News"),
        ("Ocean Cleanup Technologies", "New methods to address marine pollution", "Ocean Conservation"),
        ("Renewable Energy Breakthroughs", "Advances making clean energy more efficient and affordable", "Clean Energy"),
        ("Carbon Capture Innovations", "New approaches to removing carbon dioxide from the atmosphere", "Climate Tech"),
    ],
    "Culture": [
        ("Digital Entertainment Trends", "How streaming and gaming are evolving", "Entertainment Weekly"),
        ("Virtual Reality in Arts", "How VR is transforming artistic expression and experiences", "Arts Technology"),
        ("Digital Preservation of Heritage", "Using technology to protect cultural artifacts and traditions", "Heritage Tech"),
        ("Evolution of Online Communities", "How digital spaces are reshaping social connections", "Community Studies"),
    ],
    "Sports": [
        ("Sports Analytics Revolution", "How data is changing athletic performance and strategy", "Sports Tech"),
        ("Esports Global Growth", "The rise of competitive gaming as mainstream entertainment", "Gaming World"),
        ("Wearable Tech in Athletics", "How athletes are using technology to optimize performance", "Athletic Performance"),
        ("Fan Engagement Technologies", "How sports teams are connecting with audiences in the digital age", "Sports Business"),
    ],
}

# Keyword -> category, checked in order
ARTICLE_CATEGORY_KEYWORDS = (
    ("Technology", ("technology", " ai ", "software")),
    ("Business", ("business", "finance", "economy")),
    ("Health", ("health", "medical", "healthcare")),
    ("Science", ("science", "research", "study")),
    ("Entertainment", ("entertainment", "movie", "music")),
    ("Sports", ("sports", "game", "team")),
    ("Education", ("education", "learning", "school")),
    ("Environment", ("environment", "climate", "green")),
)

TAG_SYNONYMS = {
    "artificial-intelligence": "ai",
    "machine-learning": "ai",
    "ml": "ai",
    "deep-learning": "ai",
    "js": "javascript",
    "py": "python",
    "reactjs": "react",
    "node": "nodejs",
    "cloud-computing": "cloud",
    "cybersecurity": "security",
    "mobile-development": "mobile",
    "db": "database",
}
