from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from accounts.models import Role, User, grant_role
from mentoring.models import MentoringService, MentoringSession, MentoringSessionMentor
from practices.models import Practice
from referrals.models import ReferralCode
from referrals.services.codes import create_referral_code


SEED_PASSWORD = "Mentorship123!"
SUPERUSER_EMAIL = "admin@mentorship.test"
SUPERUSER_PASSWORD = "AdminMentorship123!"
SEED_REFERRAL_CODE = "WELCOME20"


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users & roles"))
            admin = self._ensure_superuser()
            grant_role(admin, Role.ADMIN)
            mentor = self._ensure_user("mentor@mentorship.test", "Maya Mentor", Role.MENTOR)
            mentee = self._ensure_user("mentee@mentorship.test", "Mika Mentee", Role.MENTEE)
            self._ensure_user("friend@mentorship.test", "Fajar Friend", Role.MENTEE)
            affiliator = self._ensure_user("affiliate@mentorship.test", "Ayu Affiliate", Role.AFFILIATOR)

            self.stdout.write(self.style.MIGRATE_HEADING("Creating mentoring services"))
            one_on_one = self._ensure_service("Career Coaching 1:1", MentoringService.ONE_ON_ONE, "150000", None)
            self._ensure_service("Portfolio Review Group", MentoringService.GROUP, "300000", 4)
            self._ensure_service("Data Science Bootcamp", MentoringService.BOOTCAMP, "2500000", 20)
            self._ensure_service("SQL Short Class", MentoringService.SHORTCLASS, "200000", 30)

            self.stdout.write(self.style.MIGRATE_HEADING("Scheduling sessions"))
            session, _ = MentoringSession.objects.get_or_create(
                service=one_on_one,
                date=timezone.localdate() + timedelta(days=7),
                defaults={"duration_minutes": 60, "notes": "Kick-off session."},
            )
            MentoringSessionMentor.objects.get_or_create(session=session, mentor=mentor)

            self.stdout.write(self.style.MIGRATE_HEADING("Creating practices"))
            Practice.objects.get_or_create(title="Python Fundamentals Drills", defaults={"price": Decimal("75000")})

            self.stdout.write(self.style.MIGRATE_HEADING("Creating referral codes"))
            if not ReferralCode.objects.filter(code=SEED_REFERRAL_CODE).exists():
                create_referral_code(
                    owner_id=affiliator.pk,
                    code=SEED_REFERRAL_CODE,
                    discount_percentage=Decimal("20"),
                    commission_percentage=Decimal("10"),
                    expiry_date=timezone.now() + timedelta(days=90),
                )

        self.stdout.write(self.style.SUCCESS("Seed data ready."))
        self.stdout.write(f"Log in as {mentee.email} / {SEED_PASSWORD} or {SUPERUSER_EMAIL} / {SUPERUSER_PASSWORD}")

    def _ensure_user(self, email: str, full_name: str, role_name: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "full_name": full_name},
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
        elif user.full_name != full_name:
            user.full_name = full_name
            user.save(update_fields=["full_name"])
        grant_role(user, role_name)
        return user

    def _ensure_service(self, name: str, service_type: str, price: str, max_participants) -> MentoringService:
        service, _ = MentoringService.objects.update_or_create(
            service_name=name,
            defaults={
                "service_type": service_type,
                "price": Decimal(price),
                "max_participants": max_participants,
                "is_active": True,
            },
        )
        return service

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            email=SUPERUSER_EMAIL,
            defaults={
                "username": SUPERUSER_EMAIL,
                "full_name": "Admin User",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        if created:
            user.set_password(SUPERUSER_PASSWORD)
            user.save()
            self.stdout.write(self.style.NOTICE(f"Created superuser {SUPERUSER_EMAIL}"))
        return user
