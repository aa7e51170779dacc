"""
Shared fixtures. Controller tests need a Qt application object for QTimer.
"""
from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication

from macrolens.services.project_model import (
    VbaModule,
    VbaParameter,
    VbaProcedure,
    VbaProgram,
)


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def calc_procedure() -> VbaProcedure:
    return VbaProcedure(
        name="Calc",
        kind="function",
        visibility="public",
        parameters=(
            VbaParameter(name="a", type_name="Double"),
            VbaParameter(name="b", type_name="Long", is_optional=True, passing_mode="byVal"),
        ),
        return_type="Double",
    )


@pytest.fixture
def program(calc_procedure) -> VbaProgram:
    return VbaProgram(
        project_name="Book1",
        modules=(
            VbaModule(
                name="Module1",
                module_type="standard",
                source_code="Sub Main()\n    Dim x As Integer\nEnd Sub\n",
                procedures=(VbaProcedure(name="Main", kind="sub"),),
            ),
            VbaModule(
                name="Module2",
                module_type="standard",
                source_code="Function Calc(a As Double, Optional b As Long) As Double\n    Calc = a\nEnd Function\n",
                procedures=(calc_procedure,),
            ),
            VbaModule(
                name="ThisWorkbook",
                module_type="document",
                source_code="' workbook events\n",
            ),
        ),
    )
