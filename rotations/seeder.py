# rotations/seeder.py
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy.orm import Session
from rotations.database import SessionLocal, engine
from rotations.models.base import Base
from rotations.models.specialty import Specialty
from rotations.models.program import Program, ProgramType
from rotations.models.content import Page, Section, SectionType
from rotations.models.blog import BlogCategory, BlogPost, BlogPostStatus
from rotations.models.team import TeamMember
from rotations.models.base import utc_now
from rotations.services.content import validate_payload


def create_tables():
    """Create all tables"""
    Base.metadata.create_all(bind=engine)
    print("✅ Database tables created")


def seed_specialties(db: Session):
    """Seed the specialty lookup table"""
    names = ["Cardiology", "Internal Medicine", "Pediatrics", "Surgery", "Radiology", "Neurology"]
    existing_names = {s.name for s in db.query(Specialty).all()}

    for name in names:
        if name not in existing_names:
            db.add(Specialty(name=name))

    db.commit()
    print("✅ Specialties seeded")


def seed_programs(db: Session):
    """Create a handful of sample programs if the catalog is empty"""
    if db.query(Program).first():
        print("ℹ️  Programs already exist")
        return

    specialties = {s.name: s.id for s in db.query(Specialty).all()}
    start = date.today() + timedelta(days=30)
    samples = [
        dict(title="Cardiology Observership", type=ProgramType.OBSERVERSHIP,
             specialty_id=specialties.get("Cardiology"), hospital_name="Massachusetts General Hospital",
             mentor_name="Dr. Sarah Chen", location="Boston, USA", country="USA", city="Boston",
             duration_weeks=4, start_date=start, total_seats=6, fee=None),
        dict(title="Hands-on Internal Medicine Rotation", type=ProgramType.HANDS_ON,
             specialty_id=specialties.get("Internal Medicine"), hospital_name="Toronto General Hospital",
             mentor_name="Dr. Ahmed Patel", location="Toronto, Canada", country="Canada", city="Toronto",
             duration_weeks=8, start_date=start + timedelta(days=14), total_seats=4, fee=Decimal("1500.00")),
        dict(title="Pediatric Surgery Fellowship", type=ProgramType.FELLOWSHIP,
             specialty_id=specialties.get("Surgery"), hospital_name="Great Ormond Street Hospital",
             mentor_name="Dr. Emily Hart", location="London, UK", country="UK", city="London",
             duration_weeks=12, start_date=start + timedelta(days=45), total_seats=2, fee=Decimal("3200.00")),
    ]
    for sample in samples:
        db.add(Program(
            **sample,
            available_seats=sample["total_seats"],
            description=f"{sample['title']} at {sample['hospital_name']}.",
            requirements=["Medical school enrollment letter", "Immunization records"],
        ))

    db.commit()
    print(f"✅ {len(samples)} sample programs created")


def seed_pages(db: Session):
    """Create the home page with a hero image and intro text"""
    if db.query(Page).filter(Page.slug == "home").first():
        print("ℹ️  Home page already exists")
        return

    page = Page(slug="home", title="Clinical Rotations")
    db.add(page)
    db.flush()  # Get the page ID

    sections = [
        ("hero", SectionType.IMAGE, {"url": "https://example.org/images/hero.jpg", "alt_text": "Residents on rounds"}),
        ("intro", SectionType.RICH_TEXT, {"body": "<p>Find observerships and hands-on rotations worldwide.</p>"}),
        ("benefits", SectionType.LIST, {"items": ["Letters of recommendation", "US clinical experience"]}),
    ]
    for order, (name, content_type, payload) in enumerate(sections):
        section_type, payload = validate_payload(content_type.value, payload)
        db.add(Section(page_id=page.id, name=name, content_type=section_type.value,
                       payload=payload, sort_order=order))

    db.commit()
    print("✅ Home page created")


def seed_blog(db: Session):
    """Create the default categories and a welcome post"""
    existing = {c.name for c in db.query(BlogCategory).all()}
    for name in ["Residency Tips", "Program Spotlights", "News"]:
        if name not in existing:
            db.add(BlogCategory(name=name))
    db.flush()

    if db.query(BlogPost).filter(BlogPost.slug == "welcome").first() is None:
        db.add(BlogPost(
            title="Welcome to Clinical Rotations", slug="welcome",
            excerpt="What to expect from an international observership.",
            content="<p>Our programs connect students with hospitals worldwide.</p>",
            author="Editorial Team", category="News", tags=["announcements"], read_time=3,
            status=BlogPostStatus.PUBLISHED, published_at=utc_now(),
        ))

    db.commit()
    print("✅ Blog seeded")


def seed_team(db: Session):
    """Create the founding team if none is listed"""
    if db.query(TeamMember).first():
        print("ℹ️  Team already exists")
        return

    members = [
        ("Dr. Sarah Chen", "Medical Director"),
        ("Dr. Ahmed Patel", "Head of Partnerships"),
    ]
    for order, (name, title) in enumerate(members):
        db.add(TeamMember(name=name, title=title, sort_order=order))

    db.commit()
    print(f"✅ {len(members)} team members created")


def run_seeder():
    """Main seeder function"""
    print("🌱 Starting database seeding...")

    # Create database session
    db = SessionLocal()

    try:
        # Create tables first
        create_tables()

        seed_specialties(db)
        seed_programs(db)
        seed_pages(db)
        seed_blog(db)
        seed_team(db)

        print("🎉 Database seeding completed successfully!")

    except Exception as e:
        print(f"❌ Error during seeding: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    run_seeder()
