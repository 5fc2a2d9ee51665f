import requests

from fakes import FakeHttp, FakeResponse
from prepdeck.models.api_call import SearchApiCall
from prepdeck.models.search import Search
from prepdeck.services.tavily_client import TavilyClient


def _search(db_session, user):
    search = Search(user_id=user.id, company="Acme")
    db_session.add(search)
    db_session.commit()
    return search


def test_search_logs_successful_call(db_session, user):
    search = _search(db_session, user)
    http = FakeHttp(FakeResponse(200, {"results": [{"url": "a"}, {"url": "b"}]}))
    client = TavilyClient(db_session, user.id, search_id=search.id, api_key="key", http=http)

    result = client.search("acme interview", max_results=5)

    assert result["results"][0]["url"] == "a"
    assert http.requests[0]["url"] == "https://api.tavily.com/search"
    assert http.requests[0]["headers"]["Authorization"] == "Bearer key"

    row = db_session.query(SearchApiCall).one()
    assert row.api_type == "search"
    assert row.query_text == "acme interview"
    assert row.response_status == 200
    assert row.results_count == 2
    assert row.credits_used == 1
    assert row.error_message is None
    assert row.search_id == search.id


def test_search_logs_http_error(db_session, user):
    http = FakeHttp(FakeResponse(429, reason="Too Many Requests"))
    client = TavilyClient(db_session, user.id, api_key="key", http=http)

    assert client.search("acme interview") is None

    row = db_session.query(SearchApiCall).one()
    assert row.response_status == 429
    assert row.error_message == "HTTP 429: Too Many Requests"
    assert row.credits_used == 1


def test_search_logs_network_error(db_session, user):
    http = FakeHttp(error=requests.ConnectionError("connection refused"))
    client = TavilyClient(db_session, user.id, api_key="key", http=http)

    assert client.search("acme interview") is None

    row = db_session.query(SearchApiCall).one()
    assert row.response_status == 0
    assert row.credits_used == 0
    assert "connection refused" in row.error_message


def test_extract_costs_one_credit_per_url(db_session, user):
    http = FakeHttp(FakeResponse(200, {"results": [{"url": "a", "raw_content": "..."}]}))
    client = TavilyClient(db_session, user.id, api_key="key", http=http)

    results = client.extract(["https://a", "https://b", "https://c"])

    assert results == [{"url": "a", "raw_content": "..."}]
    row = db_session.query(SearchApiCall).one()
    assert row.api_type == "extract"
    assert row.credits_used == 3
    assert row.query_text == "Extract 3 URLs"
