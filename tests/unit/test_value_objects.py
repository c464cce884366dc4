"""
Unit tests for value objects.
"""

from datetime import timedelta

import pytest

from booking_engine.domain.value_objects.job_attributes import (
    Certification,
    Gender,
    JobType,
    certification_from_job_for,
    gender_from_job_for,
)
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.domain.value_objects.session_time import SessionTime, format_minutes
from booking_engine.domain.value_objects.translator import (
    TranslatorLevel,
    TranslatorType,
)
from booking_engine.domain.value_objects.user_role import UserRole


class TestJobStatus:
    """Test JobStatus value object."""

    def test_enum_values(self):
        """Test that all expected enum values exist."""
        expected_values = [
            "pending",
            "assigned",
            "started",
            "completed",
            "withdrawbefore24",
            "withdrawafter24",
            "timedout",
            "not_carried_out_customer",
        ]
        assert [status.value for status in JobStatus] == expected_values

    def test_is_terminal(self):
        assert JobStatus.COMPLETED.is_terminal() is True
        assert JobStatus.WITHDRAWBEFORE24.is_terminal() is True
        assert JobStatus.WITHDRAWAFTER24.is_terminal() is True
        assert JobStatus.NOT_CARRIED_OUT_CUSTOMER.is_terminal() is True

        assert JobStatus.PENDING.is_terminal() is False
        assert JobStatus.ASSIGNED.is_terminal() is False
        assert JobStatus.STARTED.is_terminal() is False
        assert JobStatus.TIMEDOUT.is_terminal() is False

    def test_lifecycle_transitions(self):
        assert JobStatus.PENDING.can_transition_to(JobStatus.ASSIGNED)
        assert JobStatus.PENDING.can_transition_to(JobStatus.TIMEDOUT)
        assert JobStatus.ASSIGNED.can_transition_to(JobStatus.PENDING)
        assert JobStatus.ASSIGNED.can_transition_to(JobStatus.STARTED)
        assert JobStatus.STARTED.can_transition_to(JobStatus.COMPLETED)
        assert JobStatus.TIMEDOUT.can_transition_to(JobStatus.PENDING)
        assert JobStatus.TIMEDOUT.can_transition_to(JobStatus.ASSIGNED)

        assert not JobStatus.PENDING.can_transition_to(JobStatus.COMPLETED)
        assert not JobStatus.STARTED.can_transition_to(JobStatus.PENDING)
        assert not JobStatus.WITHDRAWBEFORE24.can_transition_to(JobStatus.PENDING)

    def test_admin_corrections_only_for_admins(self):
        assert not JobStatus.COMPLETED.can_transition_to(JobStatus.TIMEDOUT)
        assert JobStatus.COMPLETED.can_transition_to(JobStatus.TIMEDOUT, by_admin=True)
        assert JobStatus.WITHDRAWAFTER24.can_transition_to(JobStatus.TIMEDOUT, by_admin=True)
        assert not JobStatus.WITHDRAWBEFORE24.can_transition_to(JobStatus.TIMEDOUT, by_admin=True)

    def test_string_comparison(self):
        assert JobStatus.PENDING == "pending"
        assert JobStatus.TIMEDOUT in ["timedout", "pending"]


class TestJobType:
    @pytest.mark.parametrize(
        "consumer_type, expected",
        [
            ("paid", JobType.PAID),
            ("rws_consumer", JobType.RWS),
            ("ngo", JobType.UNPAID),
            (None, JobType.UNPAID),
        ],
    )
    def test_from_consumer_type(self, consumer_type, expected):
        assert JobType.from_consumer_type(consumer_type) == expected


class TestTranslatorType:
    @pytest.mark.parametrize(
        "job_type, expected",
        [
            (JobType.PAID, TranslatorType.PROFESSIONAL),
            (JobType.RWS, TranslatorType.RWS_TRANSLATOR),
            (JobType.UNPAID, TranslatorType.VOLUNTEER),
            ("unpaid", TranslatorType.VOLUNTEER),
            ("something-else", TranslatorType.VOLUNTEER),
        ],
    )
    def test_for_job_type(self, job_type, expected):
        assert TranslatorType.for_job_type(job_type) == expected


class TestCertification:
    """Test certification parsing and level expansion."""

    def test_parse(self):
        assert Certification.parse(None) == Certification.NONE
        assert Certification.parse("") == Certification.NONE
        assert Certification.parse("certified") == Certification.YES
        assert Certification.parse("n_law") == Certification.N_LAW

    def test_parse_rejects_unknown_value(self):
        with pytest.raises(ValueError):
            Certification.parse("gold")

    def test_certified_accepts_every_certified_level(self):
        assert Certification.YES.acceptable_levels() == {
            TranslatorLevel.CERTIFIED,
            TranslatorLevel.CERTIFIED_LAW,
            TranslatorLevel.CERTIFIED_HEALTH,
        }
        assert Certification.BOTH.acceptable_levels() == Certification.YES.acceptable_levels()

    def test_specialisations(self):
        assert Certification.LAW.acceptable_levels() == {TranslatorLevel.CERTIFIED_LAW}
        assert Certification.N_LAW.acceptable_levels() == {TranslatorLevel.CERTIFIED_LAW}
        assert Certification.HEALTH.acceptable_levels() == {TranslatorLevel.CERTIFIED_HEALTH}
        assert Certification.N_HEALTH.acceptable_levels() == {TranslatorLevel.CERTIFIED_HEALTH}

    def test_normal_accepts_uncertified_levels(self):
        assert Certification.NORMAL.acceptable_levels() == {
            TranslatorLevel.LAYMAN,
            TranslatorLevel.TRANSLATION_COURSE,
        }

    def test_no_requirement_accepts_everyone(self):
        assert Certification.NONE.acceptable_levels() == frozenset(TranslatorLevel)


class TestJobForOptions:
    """Test normalisation of the "job for" option list."""

    @pytest.mark.parametrize(
        "options, expected",
        [
            ([], Certification.NONE),
            (["normal"], Certification.NORMAL),
            (["certified"], Certification.YES),
            (["certified_in_law"], Certification.LAW),
            (["certified_in_health"], Certification.HEALTH),
            (["certified_in_helth"], Certification.HEALTH),
            (["normal", "certified"], Certification.BOTH),
            (["normal", "certified_in_law"], Certification.N_LAW),
            (["normal", "certified_in_helth"], Certification.N_HEALTH),
            (["female", "certified"], Certification.YES),
        ],
    )
    def test_certification(self, options, expected):
        assert certification_from_job_for(options) == expected

    def test_gender(self):
        assert gender_from_job_for(["male", "normal"]) == Gender.MALE
        assert gender_from_job_for(["female"]) == Gender.FEMALE
        assert gender_from_job_for(["certified"]) is None
        assert gender_from_job_for(None) is None


class TestSessionTime:
    def test_parse_and_format(self):
        session_time = SessionTime.parse("1:05:00")
        assert session_time.total_seconds == 3900
        assert session_time.minutes == 65
        assert str(session_time) == "1:05:00"
        assert session_time.display() == "1h 05min"

    @pytest.mark.parametrize("value", ["", "abc", "1:60:00", "1:00", "-1:00:00"])
    def test_parse_rejects_malformed_values(self, value):
        with pytest.raises(ValueError):
            SessionTime.parse(value)

    def test_from_interval_never_negative(self):
        assert SessionTime.from_interval(timedelta(minutes=-5)).total_seconds == 0
        assert str(SessionTime.from_interval(timedelta(hours=2, seconds=7))) == "2:00:07"

    def test_format_minutes(self):
        assert format_minutes(45) == "45min"
        assert format_minutes(60) == "1h"
        assert format_minutes(125) == "2h 05min"


class TestUserRole:
    def test_is_staff(self):
        assert UserRole.ADMIN.is_staff() is True
        assert UserRole.SUPERADMIN.is_staff() is True
        assert UserRole.CUSTOMER.is_staff() is False
        assert UserRole.TRANSLATOR.is_staff() is False
