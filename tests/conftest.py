"""Pytest configuration and shared fixtures for pindiagram tests."""

import json

import pytest

from pindiagram import DiagramGenerator, McuDatabase, Mcu, Pin


@pytest.fixture
def qfp4_mcu():
    """Smallest package: one pin per side, one function per pin."""
    return Mcu(
        model="TESTQFP4",
        package="LQFP4",
        pins=[
            Pin(1, "PA0", ("UART_TX",)),
            Pin(2, "PA1", ("UART_RX",)),
            Pin(3, "PA2", ("SPI_MOSI",)),
            Pin(4, "PA3", ("SPI_MISO",)),
        ],
    )


@pytest.fixture
def lqfp48_pins():
    """A sparse LQFP48 pin list with interleaved peripherals."""
    return [
        Pin(1, "VBAT", (), "Power"),
        Pin(10, "PA0", ("USART2_CTS", "TIM2_CH1", "EVENTOUT"), "I/O"),
        Pin(12, "PA2", ("USART2_TX", "TIM2_CH3"), "I/O"),
        Pin(30, "PA9", ("USART1_TX", "TIM1_CH2", "USART1_CK"), "I/O"),
        Pin(31, "PA10", ("USART1_RX", "TIM1_CH3"), "I/O"),
        Pin(42, "PB6", ("I2C1_SCL", "TIM4_CH1", "USART1_TX"), "I/O"),
        Pin(43, "PB7", ("I2C1_SDA", "TIM4_CH2"), "I/O"),
        Pin(48, "VDD", (), "Power"),
    ]


@pytest.fixture
def lqfp48_mcu(lqfp48_pins):
    """LQFP48 MCU built from lqfp48_pins."""
    return Mcu(model="STM32F401CCUx", package="LQFP48", pins=lqfp48_pins)


@pytest.fixture
def generator():
    """Default DiagramGenerator instance."""
    return DiagramGenerator()


def _pin_json(pin):
    data = {"position": pin.position, "name": pin.name}
    if pin.type:
        data["type"] = pin.type
    if pin.functions:
        data["functions"] = list(pin.functions)
    return data


@pytest.fixture
def database_dir(tmp_path, lqfp48_pins):
    """Directory of MCU model files across three families."""
    models = {
        "STM32F401CCUx": ("LQFP48", lqfp48_pins),
        "STM32F401RCTx": (
            "LQFP64",
            [
                Pin(14, "PA0", ("USART2_CTS", "TIM2_CH1")),
                Pin(42, "PA9", ("USART1_TX", "TIM1_CH2")),
            ],
        ),
        "STM32F429ZITx": (
            "LQFP144",
            [
                Pin(34, "PA0", ("USART2_CTS", "UART4_TX")),
                Pin(101, "PA9", ("USART1_TX",)),
            ],
        ),
        "STM32F103C8Tx": (
            "LQFP48",
            [Pin(30, "PA9", ("USART1_TX", "TIM1_CH2"))],
        ),
        "STM32F429NIHx": ("TFBGA216", [Pin(1, "PA0", ("USART2_CTS",))]),
    }
    for model, (package, pins) in models.items():
        data = {"package": package, "pins": [_pin_json(pin) for pin in pins]}
        (tmp_path / f"{model}.json").write_text(json.dumps(data), encoding="utf-8")
    return tmp_path


@pytest.fixture
def database(database_dir):
    """McuDatabase over database_dir."""
    return McuDatabase(database_dir)
