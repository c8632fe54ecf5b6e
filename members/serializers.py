from decimal import Decimal
from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from members.models import Member, Address, EmergencyContact, MemberShareCommitment
from schools.models import School
from savingstypes.models import SavingAccountType
from sharetypes.models import ShareType


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ("city", "sub_city", "wereda")


class EmergencyContactSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmergencyContact
        fields = ("name", "phone")


class MemberShareCommitmentSerializer(serializers.ModelSerializer):
    share_type = serializers.SlugRelatedField(
        slug_field="name", queryset=ShareType.objects.all()
    )
    monthly_committed_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )

    class Meta:
        model = MemberShareCommitment
        fields = ("share_type", "monthly_committed_amount", "status")
        read_only_fields = ("status",)


class MemberSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(
        required=False,
        allow_null=True,
        validators=[
            UniqueValidator(
                queryset=Member.objects.all(),
                message="A member with this email already exists.",
            )
        ],
    )
    school = serializers.SlugRelatedField(
        slug_field="reference", queryset=School.objects.all()
    )
    school_name = serializers.CharField(source="school.name", read_only=True)
    saving_account_type = serializers.SlugRelatedField(
        slug_field="name",
        queryset=SavingAccountType.objects.all(),
        required=False,
        allow_null=True,
    )
    salary = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    expected_monthly_saving = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )
    address = AddressSerializer(required=False, allow_null=True)
    emergency_contact = EmergencyContactSerializer(required=False, allow_null=True)
    share_commitments = MemberShareCommitmentSerializer(many=True, required=False)

    class Meta:
        model = Member
        fields = (
            "member_no",
            "full_name",
            "email",
            "sex",
            "phone_number",
            "school",
            "school_name",
            "join_date",
            "status",
            "closure_date",
            "salary",
            "saving_account_type",
            "expected_monthly_saving",
            "savings_balance",
            "shares_count",
            "address",
            "emergency_contact",
            "share_commitments",
            "created_at",
            "updated_at",
            "reference",
        )
        read_only_fields = (
            "member_no",
            "status",
            "closure_date",
            "savings_balance",
            "shares_count",
        )

    def validate_share_commitments(self, value):
        names = [item["share_type"].name for item in value]
        if len(names) != len(set(names)):
            raise serializers.ValidationError(
                "Each share type can only be committed to once."
            )
        return value

    def _save_nested(self, member, address, emergency_contact, commitments):
        # Omitted keys leave the related rows alone; explicit null removes them
        if address is not None:
            Address.objects.update_or_create(member=member, defaults=address)
        elif "address" in self.initial_data:
            Address.objects.filter(member=member).delete()

        if emergency_contact is not None:
            EmergencyContact.objects.update_or_create(
                member=member, defaults=emergency_contact
            )
        elif "emergency_contact" in self.initial_data:
            EmergencyContact.objects.filter(member=member).delete()

        if commitments is not None:
            member.share_commitments.all().delete()
            MemberShareCommitment.objects.bulk_create(
                [MemberShareCommitment(member=member, **item) for item in commitments]
            )

    def create(self, validated_data):
        address = validated_data.pop("address", None)
        emergency_contact = validated_data.pop("emergency_contact", None)
        commitments = validated_data.pop("share_commitments", None)

        with transaction.atomic():
            member = Member.objects.create(**validated_data)
            self._save_nested(member, address, emergency_contact, commitments)
        return member

    def update(self, instance, validated_data):
        address = validated_data.pop("address", None)
        emergency_contact = validated_data.pop("emergency_contact", None)
        commitments = validated_data.pop("share_commitments", None)

        with transaction.atomic():
            instance = super().update(instance, validated_data)
            self._save_nested(instance, address, emergency_contact, commitments)
        instance.refresh_from_db()
        return instance


class AccountClosureSerializer(serializers.Serializer):
    DEPOSIT_MODE_CHOICES = ["Cash", "Bank", "Wallet"]

    deposit_mode = serializers.ChoiceField(choices=DEPOSIT_MODE_CHOICES)
    source_name = serializers.CharField(required=False, allow_blank=True)
    transaction_reference = serializers.CharField(required=False, allow_blank=True)
    evidence_url = serializers.URLField(required=False, allow_blank=True)


class ClosedMemberSerializer(serializers.ModelSerializer):
    school_name = serializers.CharField(source="school.name", read_only=True)

    class Meta:
        model = Member
        fields = (
            "member_no",
            "full_name",
            "email",
            "school_name",
            "join_date",
            "closure_date",
            "reference",
        )
