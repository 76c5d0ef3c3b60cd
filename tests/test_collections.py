from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Mapping, Sequence

import pytest

from structfill import (
    ConversionError,
    Default,
    InvalidNestedInputError,
    fill,
)


@dataclass
class Classroom:
    building: str = ""
    number: int = 0


@dataclass
class School:
    students: list[str] = field(default_factory=list)
    ages: list[int] = field(default_factory=list)
    classrooms: list[Classroom] = field(default_factory=list)


@dataclass
class Simple:
    items: dict[str, str] = field(default_factory=dict)
    items2: dict[str, int] = field(default_factory=dict)


@dataclass
class Employee:
    name: Annotated[str, Default("John Doe")] = ""
    age: int = 0


@dataclass
class Company:
    team: dict[str, list[Employee]] = field(default_factory=dict)


@dataclass
class Level3:
    prop5: str = ""


@dataclass
class Level2:
    prop3: str = ""
    prop4: list[Level3] = field(default_factory=list)


@dataclass
class Level1:
    prop1: str = ""
    prop2: Level2 = field(default_factory=Level2)


@dataclass
class Grid:
    rows: list[list[int]] = field(default_factory=list)
    scale: tuple[float, ...] = ()
    labels: Sequence[str] = field(default_factory=list)
    weights: Mapping[int, float] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)


def test_fill_slices_of_primitives_and_structs() -> None:
    school = School()

    fill(
        school,
        {
            "students": ["Alice", "Bob"],
            "ages": [25, 30],
            "classrooms": [
                {"building": "A", "number": 101},
                {"building": "B", "number": 201},
            ],
        },
    )

    assert school == School(
        students=["Alice", "Bob"],
        ages=[25, 30],
        classrooms=[Classroom("A", 101), Classroom("B", 201)],
    )


def test_sequence_is_replaced_not_extended() -> None:
    school = School(students=["Zed"], ages=[1, 2, 3])

    fill(school, {"students": ["Alice"], "ages": []})

    assert school.students == ["Alice"]
    assert school.ages == []


def test_sequence_elements_are_coerced() -> None:
    school = School()

    fill(school, {"students": ["Alice", 7], "ages": ["25", 30.0]})

    assert school.students == ["Alice", "7"]
    assert school.ages == [25, 30]


def test_struct_elements_receive_defaults() -> None:
    school = School()

    fill(school, {"classrooms": [{}]})

    assert school.classrooms == [Classroom()]


def test_sequence_field_requires_sequence() -> None:
    with pytest.raises(InvalidNestedInputError, match="students: invalid type str"):
        fill(School(), {"students": "Alice"})


def test_struct_element_requires_mapping() -> None:
    with pytest.raises(InvalidNestedInputError, match=r"classrooms\[1\]"):
        fill(School(), {"classrooms": [{"building": "A"}, "B"]})


def test_scalar_element_conversion_error() -> None:
    with pytest.raises(ConversionError, match=r"ages\[1\]: cannot convert 'old' to int"):
        fill(School(), {"ages": [1, "old"]})


def test_fill_map_of_primitives() -> None:
    simple = Simple()

    fill(
        simple,
        {
            "items": {"key1": "value1", "key2": "value2"},
            "items2": {"key1": 1, "key2": "2"},
        },
    )

    assert simple == Simple(
        items={"key1": "value1", "key2": "value2"},
        items2={"key1": 1, "key2": 2},
    )


def test_map_field_requires_mapping() -> None:
    with pytest.raises(InvalidNestedInputError, match="items: invalid type list"):
        fill(Simple(), {"items": ["value1"]})


def test_map_of_struct_sequences_converts_directly() -> None:
    company = Company()
    dev = [Employee(name="Alice", age=25), Employee(name="Bob", age=30)]
    qa = [Employee(name="Charlie", age=35)]

    fill(company, {"team": {"dev": dev, "qa": qa}})

    assert company == Company(team={"dev": dev, "qa": qa})


def test_map_values_are_not_struct_filled() -> None:
    with pytest.raises(ConversionError, match="team"):
        fill(Company(), {"team": {"dev": [{"name": "Alice", "age": 25}]}})


def test_fill_deep_nested_struct() -> None:
    level1 = Level1()

    fill(
        level1,
        {
            "prop1": "value1",
            "prop2": {
                "prop3": "value3",
                "prop4": [{"prop5": "value5"}, {"prop5": "value6"}],
            },
        },
    )

    assert level1 == Level1(
        prop1="value1",
        prop2=Level2(prop3="value3", prop4=[Level3("value5"), Level3("value6")]),
    )


def test_nested_containers_and_abstract_collection_types() -> None:
    grid = Grid()

    fill(
        grid,
        {
            "rows": [[1, 2], ["3", 4.0]],
            "scale": [1, "2.5"],
            "labels": ("x", "y"),
            "weights": {"1": 0.5, 2: "1.5"},
            "extra": {"anything": [1, {"goes": True}]},
        },
    )

    assert grid.rows == [[1, 2], [3, 4]]
    assert grid.scale == (1.0, 2.5)
    assert grid.labels == ["x", "y"]
    assert grid.weights == {1: 0.5, 2: 1.5}
    assert grid.extra == {"anything": [1, {"goes": True}]}
