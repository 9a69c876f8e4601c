# constants.py
# -*- coding: utf-8 -*-

# ==============================
# 1) Line data (Route Graph)
# ==============================

INTERCHANGE = "Civil Court (District Court)"

PURPLE_LINE = (
    "PCMC",
    "Sant Tukaram Nagar",
    "Bhosari",
    "Kasarwadi",
    "Phugewadi",
    "Dapodi",
    "Bopodi",
    "Khadki",
    "Range Hill",
    "Shivaji Nagar",
    INTERCHANGE,
    "Budhwar Peth",
    "Mandai",
    "Swargate",
)

AQUA_LINE = (
    "Vanaz",
    "Anand Nagar",
    "Ideal Colony",
    "Nal Stop",
    "Garware College",
    "Deccan Gymkhana",
    "Chhatrapati Sambhaji Udyan",
    "PMC",
    INTERCHANGE,
    "Mangalwar Peth",
    "Pune Railway Station",
    "Ruby Hall Clinic",
    "Bund Garden",
    "Yerawada",
    "Ramwadi",
)

LINES = {
    "Purple Line": PURPLE_LINE,
    "Aqua Line": AQUA_LINE,
}

# ==============================
# 2) Fare / duration rules
# ==============================

FARE_TIERS = (
    (3, 15),
    (7, 25),
)
FARE_MAX = 35
TRANSFER_SURCHARGE = 5
MINUTES_PER_STATION = 2.5
INTERCHANGE_PENALTY_MIN = 7

# ==============================
# 3) Keyword tables
# ==============================

GREETING_WORDS = ("hi", "hello", "hey", "start", "begin", "help", "menu", "options")

METRO_KEYWORDS = (
    "metro", "route", "station", "fare", "ticket", "line", "time", "schedule",
    "pune", "pcmc", "swargate", "vanaz", "ramwadi", "civil court",
)

FARE_BETWEEN_KEYWORDS = ("fare", "cost", "price")
FARE_KEYWORDS = ("fare", "cost", "price", "ticket")
SCHEDULE_KEYWORDS = ("time", "schedule", "hour")
FESTIVAL_KEYWORDS = ("ganesh", "festival", "ganeshotsav")
ROUTE_KEYWORDS = ("route", "line")

STATION_LISTING_CUES = (
    "which stations", "stations on", "list all", "all stations",
    "complete", "detailed", "how many", "what stations",
)

# Length thresholds of the classifier cascade (characters of the lowered text)
DELEGATE_LENGTH_THRESHOLD = 20
SHORT_STATION_QUERY_LIMIT = 15

# ==============================
# 4) Quick reply menus
# ==============================

OPTION_ROUTES = "🚉 Routes & Stations"
OPTION_FARES = "💰 Fares & Tickets"
OPTION_SCHEDULES = "⏰ Schedules"
OPTION_FESTIVAL = "🎉 Festival Info"

WELCOME_OPTIONS = (OPTION_ROUTES, OPTION_FARES, OPTION_SCHEDULES)
MENU_OPTIONS = (OPTION_ROUTES, OPTION_FARES, OPTION_SCHEDULES, OPTION_FESTIVAL)

# ==============================
# 5) Canned texts
# ==============================

WELCOME_TEXT = """🚇 *Welcome to Pune Metro Assistant!*

I'm here to help you with all things Pune Metro. What would you like to know?

• Routes and stations
• Fares and tickets
• Schedules and timings

Just type your question or use the buttons below!"""

MENU_TEXT = """🤔 *How can I help you?*

Choose from these options or type your question:"""

ROUTE_TEXT = """🚉 *Pune Metro Routes*

*Purple Line* (PCMC ↔ Swargate)
• 14 stations total
• Interchange at Civil Court

*Aqua Line* (Vanaz ↔ Ramwadi)
• 15 stations total
• Interchange at Civil Court

*Key Stations:*
• PCMC (Terminal)
• Civil Court (Interchange)
• Pune Railway Station
• Swargate (Terminal)
• Vanaz (Terminal)
• Ramwadi (Terminal)

{station_lists}

Need specific station info? Just ask!"""

ROUTE_DETAIL_TEXT = """🚇 **Pune Metro Routes:**

{numbered_lines}

**Interchange:** Civil Court (District Court) connects both lines

Need specific station details or fare information? Just ask! 😊"""

FARE_TEXT = """💰 *Pune Metro Fares*

*Fare Range:* ₹15 - ₹40

*Examples:*
• Short distance (1-3 stations): ₹15
  (PCMC to Bhosari: ₹15)
• Medium distance (4-7 stations): ₹25
  (Vanaz to PMC: ₹25)
• Long distance (8+ stations): ₹35
  (PCMC to Swargate: ₹35)
• Changing lines at Civil Court: +₹5

*Special Passes:*
• Daily Pass: ₹100 (unlimited rides)
• Student Pass: 30% discount
• NCMC Card: 10-30% discount

Need specific fare? Tell me your route!"""

FARE_DETAIL_TEXT = """💰 **Pune Metro Fare Structure:**

**Distance-based Fares:**
• Short distance (1-3 stations): ₹15
• Medium distance (4-7 stations): ₹25
• Long distance (8+ stations): ₹35
• Transfer at Civil Court: +₹5

**Popular Routes:**
• PCMC to Swargate: ₹35
• Vanaz to Ramwadi: ₹35
• PCMC to Vanaz (via Civil Court): ₹40

**Ticket Types:**
• Single Journey Ticket
• Return Ticket
• Smart Card (with discounts)

Need fare for specific stations? Just ask! 😊"""

SCHEDULE_TEXT = """⏰ *Pune Metro Schedule*

*Regular Hours:*
• 6:00 AM - 11:00 PM
• Both Purple & Aqua lines
• Daily service

*Special Events:*
• Extended hours during festivals
• Continuous service on special occasions

*Current Status:*
Services running normally on regular schedule.

Need festival timings? Ask about Ganeshotsav!"""

SCHEDULE_DETAIL_TEXT = """⏰ **Pune Metro Operating Hours:**

**Regular Days:**
• First Train: 06:00 AM
• Last Train: 11:00 PM
• Frequency: Every 5-10 minutes

**Peak Hours (7-10 AM, 6-9 PM):**
• Frequency: Every 5 minutes

**Off-Peak Hours:**
• Frequency: Every 8-10 minutes

**Special Events:**
• Ganeshotsav: Extended hours (06:00 AM - 12:00 AM)
• Festivals: Check announcements

**Station Operating Hours:**
• All stations open: 05:45 AM - 11:15 PM

Need specific timing for your route? Just ask! 😊"""

FESTIVAL_TEXT = """🎉 *Ganeshotsav 2025 Special Schedule*

*Aug 27-31:* Regular hours (6 AM-11 PM)
*Sep 1-5:* Extended hours (6 AM-2 AM)
*Sep 6-7:* Continuous 41-hour service
*Sep 8:* Normal schedule resumes

*Special Features:*
• Extended midnight service
• Continuous operations for Anant Chaturdashi
• Enhanced frequency during peak hours

Plan your festival travel with confidence! 🚇"""

CONTEXTUAL_PREFIX = 'Based on your recent query about "{message}", here\'s the {topic} information:\n\n'

FARE_BETWEEN_FALLBACK_TEXT = """💰 *Fare Information*

For specific route fares like "{message}", please use the fare calculator or contact Pune Metro customer service.

*General Fare Range:* ₹15 - ₹40

*Quick Options:*
• Short distance: ₹15
• Medium distance: ₹25
• Long distance: ₹35

Need more details? Use the buttons below!"""

FARE_QUOTE_TEXT = """💰 *Fare Information*

*{origin}* → *{destination}*
• Stations: {stations}
• Fare: ₹{fare}
• Travel time: ~{minutes} min{transfer_note}

Need more details? Use the buttons below!"""

TRANSFER_NOTE = "\n• Change lines at Civil Court (District Court)"

GENERIC_FALLBACK_TEXT = (
    "I understand you're asking about: {message}\n\n"
    "For detailed information, please use the buttons below or try rephrasing your question."
)

# ==============================
# 6) Completion service prompts
# ==============================

SYSTEM_PROMPT = (
    "You are a helpful Pune Metro assistant with access to comprehensive route information, "
    "fares, stations, and policies. You have detailed knowledge of both Purple Line (PCMC-Swargate) "
    "and Aqua Line (Vanaz-Ramwadi) including all stations and the interchange at Civil Court. "
    "Always provide specific, accurate information from the knowledge base when available. "
    "Format responses for WhatsApp with emojis and clear structure.\n\n"
    "When users refer to station numbers (like '4th station' or 'station 4'), they mean the "
    "position in the numbered station list of the line. Always name the stations you refer to.\n\n"
    "Never invent fares: use the fare rules and the computed route estimate from the context."
)

FARE_RULES_TEXT = """FARE CALCULATION SYSTEM:
- Count stations between origin and destination (excluding origin, including destination)
- 1-3 stations: ₹15
- 4-7 stations: ₹25
- 8+ stations: ₹35
- Transfer routes (different lines): add ₹5 for the interchange at Civil Court

DURATION CALCULATION:
- Direct routes: stations × 2.5 minutes
- Transfer routes: (stations × 2.5) + 7 minutes interchange time

NEXT TRAIN TIMING:
- Peak hours (7-10 AM, 6-9 PM): every 5 minutes
- Off-peak hours: every 8-10 minutes
- First train: 06:00 AM, last train: 11:00 PM"""

CONTEXT_FOOTER = (
    "Please provide a helpful, accurate response based on the Pune Metro knowledge base. "
    "If the information is not available in the knowledge base, say so politely. "
    "Keep responses concise and informative for WhatsApp format."
)
