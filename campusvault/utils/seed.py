"""Sample subject catalogue for a fresh database."""
import logging

from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.models.subject import Subject

logger = logging.getLogger(__name__)

# (name, code, year, semester, icon)
SAMPLE_SUBJECTS = [
    ("Mathematics I", "MA101", 1, 1, "fas fa-calculator"),
    ("Physics", "PH101", 1, 1, "fas fa-atom"),
    ("Programming Fundamentals", "CS101", 1, 1, "fas fa-code"),
    ("English Communication", "EN101", 1, 1, "fas fa-book-open"),
    ("Engineering Drawing", "ME101", 1, 1, "fas fa-drafting-compass"),

    ("Mathematics II", "MA102", 1, 2, "fas fa-calculator"),
    ("Chemistry", "CH101", 1, 2, "fas fa-flask"),
    ("Data Structures", "CS102", 1, 2, "fas fa-project-diagram"),
    ("Digital Logic", "CS103", 1, 2, "fas fa-microchip"),
    ("Environmental Science", "ES101", 1, 2, "fas fa-leaf"),

    ("Algorithms", "CS201", 2, 1, "fas fa-sitemap"),
    ("Computer Organization", "CS202", 2, 1, "fas fa-memory"),
    ("Object Oriented Programming", "CS203", 2, 1, "fas fa-object-group"),
    ("Database Systems", "CS204", 2, 1, "fas fa-database"),
    ("Discrete Mathematics", "MA201", 2, 1, "fas fa-infinity"),

    ("Operating Systems", "CS205", 2, 2, "fas fa-desktop"),
    ("Computer Networks", "CS206", 2, 2, "fas fa-network-wired"),
    ("Software Engineering", "CS207", 2, 2, "fas fa-tools"),
    ("Web Development", "CS208", 2, 2, "fas fa-globe"),
    ("Statistics", "MA202", 2, 2, "fas fa-chart-bar"),

    ("Artificial Intelligence", "CS301", 3, 1, "fas fa-robot"),
    ("Machine Learning", "CS302", 3, 1, "fas fa-brain"),
    ("Compiler Design", "CS303", 3, 1, "fas fa-cog"),
    ("Computer Graphics", "CS304", 3, 1, "fas fa-paint-brush"),
    ("Cybersecurity", "CS305", 3, 1, "fas fa-shield-alt"),

    ("Distributed Systems", "CS306", 3, 2, "fas fa-server"),
    ("Cloud Computing", "CS307", 3, 2, "fas fa-cloud"),
    ("Mobile App Development", "CS308", 3, 2, "fas fa-mobile-alt"),
    ("Data Mining", "CS309", 3, 2, "fas fa-search"),
    ("Human Computer Interaction", "CS310", 3, 2, "fas fa-users"),

    ("Advanced Algorithms", "CS401", 4, 1, "fas fa-chess"),
    ("Blockchain Technology", "CS402", 4, 1, "fas fa-link"),
    ("IoT Systems", "CS403", 4, 1, "fas fa-wifi"),
    ("Project Management", "MG401", 4, 1, "fas fa-tasks"),
    ("Research Methodology", "RM401", 4, 1, "fas fa-microscope"),

    ("Final Year Project", "CS404", 4, 2, "fas fa-graduation-cap"),
    ("Industry Internship", "IN401", 4, 2, "fas fa-briefcase"),
    ("Advanced Topics in AI", "CS405", 4, 2, "fas fa-lightbulb"),
    ("Entrepreneurship", "EN401", 4, 2, "fas fa-rocket"),
]


def seed_subjects(db: Session, branch: str = None) -> int:
    """Insert the sample subjects; a database that already has subjects is left alone"""
    if db.query(Subject.id).first() is not None:
        logger.info("Database already has subjects, skipping seeding")
        return 0

    branch = branch or settings.DEFAULT_BRANCH
    db.add_all([
        Subject(name=name, code=code, year=year, semester=semester, branch=branch, icon=icon)
        for name, code, year, semester, icon in SAMPLE_SUBJECTS
    ])
    db.commit()
    logger.info(f"Seeded {len(SAMPLE_SUBJECTS)} subjects for branch {branch}")
    return len(SAMPLE_SUBJECTS)
