from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from fx_bcv.ingestion.models import CacheState, Rate

BCV_URI = "https://www.bcv.org.ve/estadisticas/tipo-cambio-de-referencia-smc"

BCV_PAGE = """
<html>
<head><title>Tipo de Cambio de Referencia SMC</title></head>
<body>
<section id="block-views-47bc7">
  <div class="view-content">
    <div id="euro" class="col-sm-12 col-xs-12">
      <div class="field-content"><div class="row recuadrotsmc">
        <div class="col-sm-6 col-xs-6"><span> EUR </span></div>
        <div class="col-sm-6 col-xs-6 centrado"><strong> 38,67283950 </strong></div>
      </div></div>
    </div>
    <div id="dolar" class="col-sm-12 col-xs-12">
      <div class="field-content"><div class="row recuadrotsmc">
        <div class="col-sm-6 col-xs-6"><span> USD </span></div>
        <div class="col-sm-6 col-xs-6 centrado"><strong> 35,42980000 </strong></div>
      </div></div>
    </div>
    <div class="pull-right dinpro center">
      Fecha Valor:
      <span class="date-display-single" property="dc:date" datatype="xsd:dateTime"
            content="2023-11-17T00:00:00-04:00">Viernes, 17 Noviembre  2023</span>
    </div>
  </div>
</section>
</body>
</html>
"""


@pytest.fixture
def bcv_page() -> str:
    return BCV_PAGE


@pytest.fixture
def example_state() -> CacheState:
    return CacheState(
        last_rate=Rate(Decimal("1.00000000"), date(2024, 4, 1)),
        previous_rate=Rate(Decimal("36.33400000"), date(2024, 3, 27)),
        refresh_time_of_day=time(19, 30),
        source_uri=BCV_URI,
    )
