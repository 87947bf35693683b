"""
Constants for the accounts app.
"""

# Profile attributes a member may set at registration or change later.
MUTABLE_PROFILE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "email",
        "gender",
        "aadhaar",
        "father_name",
        "mother_name",
        "relationship_with_head",
        "gothra",
        "date_of_birth",
        "education",
        "upanayana",
        "marital_status",
        "number_of_children",
        "occupation",
        "occupation_details",
        "annual_income",
        "tax_payer",
        "house_type",
        "residence_address",
        "family_house",
        "ration_card_type",
        "special_person",
        "profile_image",
    }
)

# Keys clients commonly echo back from a fetched profile. Dropped silently
# on update; listed so the drop can be logged.
PROTECTED_PROFILE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "_id",
        "__v",
        "phone",
        "is_profile_complete",
        "joined_date",
        "created_at",
        "updated_at",
        "isProfileComplete",
        "joinedDate",
        "createdAt",
        "updatedAt",
    }
)

NAME_MIN_LENGTH = 2
