#!/usr/bin/env python3
"""
Exemplo básico de uso do APM Collector.

Este exemplo demonstra como:
1. Coletar um script/worker com os hooks do processo
2. Instalar o middleware em uma aplicação FastAPI

As credenciais vêm de APM_API_KEY e APM_PROJECT_ID.
"""

import warnings

from fastapi import FastAPI

from apm_collector import StaticRequestProvider, StaticResponseProvider, configure_logging, create_collector, install
from apm_collector.integrations import CollectorMiddleware

configure_logging("INFO", "console")

app = FastAPI()
app.add_middleware(CollectorMiddleware)


@app.get("/users/{user_id}")
async def get_user(user_id: int):
    return {"id": user_id}


def run_job():
    """Job em lote: o payload é enviado quando o processo termina."""
    response = StaticResponseProvider()
    collector = create_collector(
        request=StaticRequestProvider(method="JOB", url="jobs://nightly-report"),
        response=response,
    )
    install(collector)

    warnings.warn("relatório sem dados de ontem", UserWarning)
    response.finish(200, body={"rows": 0})


if __name__ == "__main__":
    run_job()
