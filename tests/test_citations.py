import datetime as dt
import json
import random

import nofake.services.citations as citations_module
from nofake.services.citations import generate_citations, truncate_analyzed_text
from nofake.services.oracle import OracleError
from nofake.services.urls import TRUSTED_DOMAINS

NOW = dt.datetime(2026, 10, 19, 12, 0, tzinfo=dt.timezone.utc)
TEXT = "La vacuna reduce hospitalizaciones en adultos mayores según un estudio reciente"


def _generate(oracle, settings, style="apa7", analyzed_text=TEXT, topic="vacunas"):
    return generate_citations(
        topic, style, analyzed_text, oracle, settings, rng=random.Random(3), now=NOW
    )


def _assert_complete(citation) -> None:
    for name, value in citation.model_dump().items():
        assert value not in (None, "", []), name


def test_missing_credential_returns_mock_citations(fake_oracle, settings):
    result = _generate(fake_oracle(reply=None), settings)
    assert len(result.citations) == 3
    assert [c.year for c in result.citations] == [2025, 2024, 2026]
    for citation in result.citations:
        _assert_complete(citation)
        assert citation.url.startswith("https://scholar.google.com/scholar?q=")
    assert result.citations[0].formatted == (
        "Smith, J. A., Johnson, M. B. (2025). Recent Advances in vacunas Research: "
        "A Comprehensive Review. *Journal of Applied Sciences*. "
        "https://doi.org/10.1016/j.jas.2023.001"
    )


def test_parse_failure_returns_default_apa_citation(fake_oracle, settings):
    result = _generate(fake_oracle(reply="lo siento, no tengo citas"), settings)
    assert len(result.citations) == 1
    citation = result.citations[0]
    _assert_complete(citation)
    assert citation.formatted == (
        "Investigador, A. (2026). Análisis académico sobre: "
        "La vacuna reduce hospitalizaciones en adultos mayo.... "
        "*Revista de Investigación Académica*. https://doi.org/10.1000/analisis-academico"
    )


def test_parse_failure_returns_default_ieee_citation(fake_oracle, settings):
    result = _generate(fake_oracle(reply="{roto"), settings, style="ieee")
    assert result.citations[0].formatted == (
        '[1] A. Investigador, "Análisis académico sobre: '
        'La vacuna reduce hospitalizaciones en adultos mayo...", '
        "*Revista de Investigación Académica*, 2026. doi: 10.1000/analisis-academico"
    )


def test_oracle_error_returns_default_citation(fake_oracle, settings):
    result = _generate(fake_oracle(error=OracleError("boom")), settings)
    assert len(result.citations) == 1
    _assert_complete(result.citations[0])


def test_oracle_citations_are_repaired_and_formatted(fake_oracle, settings):
    reply = json.dumps(
        {
            "searchQuery": "vacunas hospitalización adultos mayores",
            "citations": [
                {
                    "authors": ["Lopez, R."],
                    "title": "Vaccine effectiveness in older adults",
                    "journal": "The Lancet",
                    "year": 2022,
                    "doi": "10.1016/S0140-6736(22)00001-1",
                    "url": "https://www.thelancet.com/journals/x",
                    "abstract": "Cohort study.",
                    "type": "journal_article",
                    "relevance": "Mide hospitalizaciones.",
                    "keyFindings": ["Menos ingresos hospitalarios"],
                },
                {"title": "Incomplete record"},
            ],
        }
    )
    result = _generate(fake_oracle(reply=f"```json\n{reply}\n```"), settings, style="ieee")

    assert result.search_query == "vacunas hospitalización adultos mayores"
    assert len(result.citations) == 2
    first, second = result.citations
    assert any(domain in first.url for domain in TRUSTED_DOMAINS)
    assert first.formatted.startswith('[1] R. Lopez, "Vaccine effectiveness in older adults"')
    assert second.formatted.startswith("[2] ")
    _assert_complete(second)


def test_result_echoes_request_and_truncates_text(fake_oracle, settings):
    long_text = "palabra " * 60
    result = _generate(fake_oracle(reply=None), settings, analyzed_text=long_text)
    assert result.format == "apa7"
    assert result.topic == "vacunas"
    assert result.analyzed_text == long_text.strip()[:200] + "..."
    assert result.search_query == " ".join(["palabra"] * 10)
    assert result.generated_at == NOW.isoformat()


def test_missing_analyzed_text_falls_back_to_topic(fake_oracle, settings):
    oracle = fake_oracle(reply="sin json")
    result = _generate(oracle, settings, analyzed_text=None, topic="cambio climático")
    assert result.analyzed_text == "cambio climático"
    assert "cambio climático" in oracle.prompts[0]
    assert "cambio climático" in result.citations[0].title


def test_truncate_keeps_short_text():
    assert truncate_analyzed_text("corto") == "corto"


def test_unreachable_urls_are_replaced_when_checking_enabled(fake_oracle, settings, monkeypatch):
    settings.verify_citation_urls = True
    checked: list[str] = []

    def _unreachable(url, timeout=4.0):
        checked.append(url)
        return False

    monkeypatch.setattr(citations_module, "url_is_reachable", _unreachable)
    result = _generate(fake_oracle(reply=None), settings)

    assert len(checked) == 3
    for citation in result.citations:
        assert citation.url.startswith("https://scholar.google.com/scholar?q=")


def test_oracle_citations_are_capped(fake_oracle, settings):
    reply = json.dumps({"citations": [{"title": f"Estudio {n}"} for n in range(20)]})
    result = _generate(fake_oracle(reply=reply), settings)
    assert len(result.citations) == 6
    assert result.citations[-1].title == "Estudio 5"
