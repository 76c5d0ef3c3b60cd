from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Annotated, Protocol

import pytest

from structfill import (
    ConversionError,
    Embedded,
    InvalidNestedInputError,
    NotAPointerToStructError,
    UnknownTypeIdentifierError,
    fill,
)


class Animal(ABC):
    @abstractmethod
    def speak(self) -> str: ...


@dataclass
class Pet:
    name: str = ""


@dataclass
class Dog(Animal):
    pet: Annotated[Pet, Embedded] = field(default_factory=Pet)

    def speak(self) -> str:
        return "Woof!"


@dataclass
class Cat(Animal):
    pet: Annotated[Pet, Embedded] = field(default_factory=Pet)
    wild: bool = False

    def speak(self) -> str:
        return "Meow!"


@dataclass
class Rock:
    name: str = ""


@dataclass
class House:
    pets: list[Animal] = field(default_factory=list)


@dataclass
class Street:
    houses: list[House] = field(default_factory=list)


class Vehicle(Protocol):
    wheels: int


@dataclass
class Bike:
    wheels: int = 2


@dataclass
class Car:
    wheels: int = 4
    brand: str = ""


@dataclass
class Garage:
    vehicles: list[Vehicle] = field(default_factory=list)


REGISTRY = {"Dog": Dog, "Cat": Cat}

PETS_INPUT = {
    "pets": [
        {"type": "Dog", "name": "Rex"},
        {"type": "Cat", "name": "Whiskers", "wild": True},
    ]
}


def test_fill_interface_sequence() -> None:
    house = House()

    fill(house, PETS_INPUT, REGISTRY)

    assert house == House(pets=[Dog(Pet(name="Rex")), Cat(pet=Pet(name="Whiskers"), wild=True)])
    assert [pet.speak() for pet in house.pets] == ["Woof!", "Meow!"]


def test_each_element_gets_a_fresh_instance() -> None:
    house = House()

    fill(house, {"pets": [{"type": "Dog", "name": "Rex"}, {"type": "Dog", "name": "Fido"}]}, REGISTRY)

    first, second = house.pets
    assert first is not second
    assert (first.pet.name, second.pet.name) == ("Rex", "Fido")


def test_missing_type_identifier_is_skipped_with_warning(fill_warnings) -> None:
    house = House()

    fill(
        house,
        {
            "pets": [
                {"type": "Dog", "name": "Rex"},
                {"name": "Polly"},
                {"type": "Cat", "name": "Whiskers", "wild": True},
            ]
        },
        REGISTRY,
    )

    assert house == House(pets=[Dog(Pet(name="Rex")), Cat(pet=Pet(name="Whiskers"), wild=True)])
    assert "warning: type identifier" in fill_warnings.text
    assert "pets[1]" in fill_warnings.text


def test_non_string_type_identifier_is_treated_as_missing(fill_warnings) -> None:
    house = House()

    fill(house, {"pets": [{"type": 7, "name": "Lucky"}]}, REGISTRY)

    assert house.pets == []
    assert "warning: type identifier" in fill_warnings.text


def test_unknown_type_identifier_fails() -> None:
    with pytest.raises(UnknownTypeIdentifierError) as excinfo:
        fill(House(), {"pets": [{"type": "Parrot", "name": "Polly"}]}, REGISTRY)

    message = str(excinfo.value)
    assert "type identifier Parrot not found" in message
    assert "available: Cat, Dog" in message
    assert excinfo.value.identifier == "Parrot"


def test_without_registry_every_element_is_unknown() -> None:
    with pytest.raises(UnknownTypeIdentifierError, match="Dog"):
        fill(House(), PETS_INPUT)


def test_empty_sequence_needs_no_registry() -> None:
    house = House(pets=[Dog()])

    fill(house, {"pets": []})

    assert house.pets == []


def test_interface_element_requires_mapping() -> None:
    with pytest.raises(InvalidNestedInputError, match=r"pets\[0\]"):
        fill(House(), {"pets": ["Dog"]}, REGISTRY)


def test_factory_must_produce_interface_instance() -> None:
    with pytest.raises(ConversionError, match=r"pets\[0\]"):
        fill(House(), {"pets": [{"type": "Rock", "name": "Pebble"}]}, {"Rock": Rock})


def test_factory_must_produce_struct() -> None:
    with pytest.raises(NotAPointerToStructError, match="provided type must be a pointer to a struct"):
        fill(House(), {"pets": [{"type": "Dog"}]}, {"Dog": lambda: "not a struct"})


def test_element_errors_propagate() -> None:
    with pytest.raises(ConversionError, match=r"pets\[0\].wild"):
        fill(House(), {"pets": [{"type": "Cat", "wild": "sometimes"}]}, REGISTRY)


def test_registry_is_threaded_through_nested_structs() -> None:
    street = Street()

    fill(
        street,
        {"houses": [{"pets": [{"type": "Cat", "name": "Tom"}]}, {"pets": []}]},
        REGISTRY,
    )

    assert street == Street(houses=[House(pets=[Cat(pet=Pet(name="Tom"))]), House()])


def test_protocol_interface() -> None:
    garage = Garage()

    fill(
        garage,
        {"vehicles": [{"type": "bike"}, {"type": "car", "brand": "Volvo", "wheels": "6"}]},
        {"bike": Bike, "car": Car},
    )

    assert garage.vehicles == [Bike(), Car(wheels=6, brand="Volvo")]
