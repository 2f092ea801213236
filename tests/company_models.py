"""Model classes shared by the tests, registered in the default registry."""

from __future__ import annotations

from functools import partial

from marshmallow import validate as v

from schema_decorators import (a, an, named_schema, nested, nested_array, nested_record,
                               nested_type, required, rule, schema)

HOUSE_KINDS = ["UNIT", "TOWNHOUSE", "VILLA"]


class Address:
    location = rule(a.String(required=True, error_messages={"required": "House address is required"}))

    def __init__(self, location=None):
        self.location = location


@named_schema("house")
class House:
    address = nested_type(lambda: Address)
    kind = rule(a.String(
        required=True,
        validate=v.OneOf(HOUSE_KINDS, error="House type must be one of the following values: UNIT, TOWNHOUSE, VILLA"),
        error_messages={"required": "House type is required"},
    ))

    def __init__(self, address=None, kind=None):
        self.address = address
        self.kind = kind


@named_schema("person")
class Person:
    email = rule(a.Email(error_messages={"invalid": "Not a valid email"}))
    age = rule(a.Integer(validate=v.Range(min=0, max=100, min_inclusive=False, max_inclusive=False,
                                          error="age must be between 0 and 100")))
    house: House | None = nested()

    def __init__(self, email=None, age=None, house=None):
        self.email = email
        self.age = age
        self.house = house


class Office:
    name = rule(a.String(required=True, error_messages={"required": "Office name is required"}))
    location = rule(a.String(required=True, error_messages={"required": "Office location is required"}))


@named_schema("job")
class Job:
    job_title = rule(a.String(
        required=True,
        validate=v.Regexp(r"^[^a-z]*$", error="Job title must be upper case"),
        error_messages={"required": "Job title is required and must be upper case"},
    ))
    office = nested_array(lambda: Office, partial(an.List, validate=v.Length(min=1, error="Office is required")))

    def __init__(self, job_title=None, office=None):
        self.job_title = job_title
        self.office = office


@named_schema("employee")
class Employee(Person):
    job: Job = nested(required("Job is required"))
    employee_id = rule(a.String(required=True, error_messages={"required": "Employee ID is required"}))
    contacts = nested_record(lambda: Person, required("Contacts are required"))

    def __init__(self, job=None, employee_id=None, contacts=None, **person):
        super().__init__(**person)
        self.job = job
        self.employee_id = employee_id
        self.contacts = contacts


@named_schema("user", reconstruct_instance=True)
class User:
    name = rule(a.String(required=True, validate=v.Length(min=1, error="Name is required"),
                         error_messages={"required": "Name is required"}))
    age = rule(a.Integer())
    friends = nested_record(lambda: Friend)

    def __init__(self, data):
        self.name = data["name"]
        self.age = data.get("age")
        self.friends = data.get("friends", {})

    def __eq__(self, other):
        return type(other) is type(self) and vars(other) == vars(self)


@schema(reconstruct_instance=True)
class Friend:
    name = rule(a.String(required=True))

    def __init__(self, data):
        self.name = data["name"]

    def __eq__(self, other):
        return type(other) is type(self) and vars(other) == vars(self)


# ───────────────────────────── factories ─────────────────────────────
def valid_employee(**overrides) -> Employee:
    values = dict(
        email="test@gmail.com",
        age=20,
        house=House(address=Address(location="Italy"), kind="VILLA"),
        job=Job(job_title="DEVELOPER", office=[
            {"location": "Italy", "name": "South Office"},
            {"location": "Italy", "name": "North Office"},
        ]),
        employee_id="123",
        contacts={},
    )
    values.update(overrides)
    return Employee(**values)


def invalid_employee(*, includes_house=True, includes_job=True, includes_office=True) -> Employee:
    job = None
    if includes_job:
        job = Job(job_title="dev", office=[{}]) if includes_office else Job()
    return Employee(
        email="test",
        age=-1,
        house=House(kind="HOUSE") if includes_house else None,
        job=job,
        contacts={},
    )


def valid_employee_data() -> dict:
    return {
        "email": "test@gmail.com",
        "age": 20,
        "house": {"address": {"location": "Italy"}, "kind": "VILLA"},
        "job": {
            "job_title": "DEVELOPER",
            "office": [
                {"name": "South Office", "location": "Italy"},
                {"name": "North Office", "location": "Italy"},
            ],
        },
        "employee_id": "123",
        "contacts": {},
    }
