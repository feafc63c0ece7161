"""Session and element behavior both backends share, run once per backend."""

import os

import pytest
from fakes import EXAMPLE_URL, OTHER_URL, SHOP_URL, el, tab_of

from omnibrowser import ActionOptions
from omnibrowser.browser.common.exceptions import (ElementNotFoundError,
                                                   ElementNotVisibleError,
                                                   SessionClosedError,
                                                   SessionMismatchError,
                                                   TabNotFoundError)
from omnibrowser.browser.common.interface import Location

SWALLOW = ActionOptions(throw_on_fail=False)


def assert_tab_invariant(browser):
    if browser.tab_count:
        assert 0 <= browser.current_tab < browser.tab_count
    else:
        assert browser.closed


# Tabs and session lifecycle

def test_starts_with_one_tab(browser):
    assert browser.tab_count == 1
    assert browser.current_tab == 0
    assert not browser.closed


def test_tab_invariant_holds_through_tab_operations(browser):
    browser.open_tab()
    assert_tab_invariant(browser)
    browser.open_tab(OTHER_URL)
    assert (browser.tab_count, browser.current_tab) == (3, 2)
    browser.switch_to_tab(0)
    assert_tab_invariant(browser)
    assert browser.current_tab == 0
    browser.close_tab()
    assert (browser.tab_count, browser.current_tab) == (2, 1)
    assert browser.get_url() == OTHER_URL
    browser.close_tab()
    assert_tab_invariant(browser)
    assert (browser.tab_count, browser.current_tab) == (1, 0)


def test_two_tab_urls(browser):
    browser.navigate_to(EXAMPLE_URL)
    browser.open_tab(OTHER_URL)
    browser.switch_to_tab(0)
    assert browser.get_url() == EXAMPLE_URL
    browser.switch_to_tab(1)
    assert browser.get_url() == OTHER_URL
    assert browser.get_title() == "Example Org"


def test_open_two_close_two(browser):
    browser.open_tab()
    browser.open_tab()
    assert browser.tab_count == 3
    browser.close_tab()
    browser.close_tab()
    assert browser.tab_count == 1
    assert browser.current_tab == 0
    assert not browser.closed


def test_closing_last_tab_closes_session(browser):
    browser.close_tab()
    assert browser.closed
    assert browser.tab_count == 0
    with pytest.raises(SessionClosedError):
        browser.get_url()
    with pytest.raises(SessionClosedError):
        browser.selector("h1")
    assert browser.get_title(SWALLOW) is None


def test_close_browser_is_idempotent(browser):
    browser.close_browser()
    browser.close_browser()
    assert browser.closed


@pytest.mark.parametrize("index", [-1, 1, 5])
def test_switch_to_missing_tab(browser, index):
    with pytest.raises(TabNotFoundError):
        browser.switch_to_tab(index)
    assert browser.current_tab == 0


def test_context_manager_closes(browser):
    with browser as session:
        session.navigate_to(EXAMPLE_URL)
    assert browser.closed


# Navigation

def test_history_navigation(browser):
    browser.navigate_to(EXAMPLE_URL)
    browser.navigate_to(OTHER_URL)
    browser.navigate_back()
    assert browser.get_url() == EXAMPLE_URL
    assert browser.get_title() == "Example Domain"
    browser.navigate_forward()
    assert browser.get_url() == OTHER_URL
    browser.refresh()
    assert browser.get_url() == OTHER_URL


# Element lookup and failure policy

def test_missing_element_throws_by_default(browser):
    browser.navigate_to(SHOP_URL)
    with pytest.raises(ElementNotFoundError):
        browser.selector("#nope").click()


def test_missing_element_swallowed_on_request(browser):
    browser.navigate_to(SHOP_URL)
    assert browser.selector("#nope").click(SWALLOW) is None
    assert browser.selector("#nope").get_text(SWALLOW) is None


def test_is_visible(browser):
    browser.navigate_to(SHOP_URL)
    assert browser.selector("#box").is_visible() is True
    assert browser.selector("#ghost").is_visible() is False
    assert browser.selector("#nope").is_visible() is False


def test_element_stays_on_its_tab(browser):
    browser.navigate_to(EXAMPLE_URL)
    heading = browser.selector("h1")
    browser.open_tab(OTHER_URL)
    assert heading.get_text() == "Example Domain"
    assert browser.selector("h1").get_text() == "Example Org"


def test_forced_selector_types(browser):
    browser.navigate_to(SHOP_URL)
    assert browser.selector("box", "id").get_text() == "Box"
    assert browser.selector("item sold-out", "class").get_text() == "Cherry"
    assert browser.selector("li", "tag").count() == 3
    assert browser.selector("text=banana").get_text() == "Banana"
    assert browser.selector("//li").count() == 3


def test_element_follows_its_selector_after_dom_change(browser):
    browser.navigate_to(SHOP_URL)
    sold_out = browser.selector(".sold-out")
    assert sold_out.get_text() == "Cherry"

    apple, _, cherry = tab_of(browser).document.body.children[0].children
    cherry.attrs["class"] = "item"
    apple.attrs["class"] = "item sold-out"
    assert sold_out.get_text() == "Apple"


# Collections

def test_count_is_not_cached(browser):
    browser.navigate_to(SHOP_URL)
    items = browser.selector("li.item")
    assert items.count() == 3
    tab_of(browser).document.body.children[0].append(el("li", {"class": "item"}, text="Date"))
    assert items.count() == 4
    tab_of(browser).document.body.children[0].children[0].remove()
    assert items.count() == 3


def test_collections_run_in_document_order(browser):
    browser.navigate_to(SHOP_URL)
    items = browser.selector(".item")

    seen = []
    items.for_each(lambda element, index: seen.append((index, element.get_text())))
    assert seen == [(0, "Apple"), (1, "Banana"), (2, "Cherry")]

    assert items.map(lambda element, index: element.get_text()) == ["Apple", "Banana", "Cherry"]

    kept = items.filter(lambda element, index: index != 1)
    assert [element.get_text() for element in kept] == ["Apple", "Cherry"]


def test_collections_on_empty_selection(browser):
    browser.navigate_to(SHOP_URL)
    assert browser.selector(".nothing").map(lambda element, index: index) == []


def test_nth(browser):
    browser.navigate_to(SHOP_URL)
    items = browser.selector(".item")
    assert items.nth(1).get_text() == "Banana"
    assert items.nth(-1).get_text() == "Cherry"
    late = items.nth(5)
    with pytest.raises(ElementNotFoundError):
        late.get_text()


def test_scoped_selection_is_deduplicated(browser):
    browser.navigate_to(SHOP_URL)
    assert browser.selector("form").selector("input").count() == 2
    # every ancestor of the items is a scope, each item still counts once
    assert browser.selector("html *").selector(".item").count() == 3


def test_reselection_does_not_change_parent(browser):
    browser.navigate_to(SHOP_URL)
    form = browser.selector("#checkout")
    form.selector("#name")
    assert form.get_attribute("id") == "checkout"


# Element actions and queries

def test_fill_and_clear(browser):
    browser.navigate_to(SHOP_URL)
    name = browser.selector("#name")
    name.fill("Ada")
    assert name.get_value() == "Ada"
    name.fill("Grace")
    assert name.get_value() == "Grace"
    name.clear()
    assert name.get_value() == ""


def test_click_checkbox(browser):
    browser.navigate_to(SHOP_URL)
    agree = browser.selector("#agree")
    assert agree.is_selected() is False
    agree.click()
    assert agree.is_selected() is True


def test_select_option_by_value(browser):
    browser.navigate_to(SHOP_URL)
    size = browser.selector("#size")
    assert size.get_value() == "m"
    size.select_option("l")
    assert size.get_value() == "l"


def test_queries(browser):
    browser.navigate_to(SHOP_URL)
    box = browser.selector("#box")
    assert box.get_attribute("class") == "panel"
    assert box.get_attribute("title") is None
    assert box.get_tag_name() == "div"
    assert box.get_css_value("color") == "rgb(255, 0, 0)"
    assert browser.selector("#size").selector("option").nth(0).get_html() == "Small"
    assert browser.selector("#buy").is_enabled() is True
    assert browser.selector("#locked").is_enabled() is False


def test_get_location(browser):
    browser.navigate_to(SHOP_URL)
    assert browser.selector("#box").get_location() == Location(10, 20)
    with pytest.raises(ElementNotVisibleError):
        browser.selector("#ghost").get_location()


def test_submit_targets_the_form(browser):
    browser.navigate_to(SHOP_URL)
    browser.selector("#name").submit()
    form = tab_of(browser).document.body.children[1]
    assert form.events == ["submit"]


def test_take_screenshot(browser, tmp_path):
    browser.navigate_to(SHOP_URL)
    path = str(tmp_path / "box.png")
    browser.selector("#box").take_screenshot(path)
    assert os.path.getsize(path) > 0


def test_wait_for_element(browser):
    browser.navigate_to(SHOP_URL)
    browser.selector("#box").wait_for_element()
    with pytest.raises(ElementNotFoundError):
        browser.selector("#nope").wait_for_element(ActionOptions(timeout=1))


def test_drag_across_sessions_is_rejected(browser, fake_playwright, fake_webdriver):
    other = type(browser).init(logs=False, action_timeout=0)
    try:
        browser.navigate_to(SHOP_URL)
        other.navigate_to(SHOP_URL)
        with pytest.raises(SessionMismatchError):
            browser.selector("#source").drag_and_drop(other.selector("#target"))
    finally:
        other.close_browser()


# Dialogs

def test_alert_accept(browser):
    dialog = tab_of(browser).open_dialog("Are you sure?")
    assert browser.alert.accept() is True
    assert dialog.accepted


def test_alert_text_then_dismiss_acts_on_same_dialog(browser):
    dialog = tab_of(browser).open_dialog("Leave page?")
    assert browser.alert.get_text() == "Leave page?"
    assert browser.alert.dismiss() is True
    assert dialog.dismissed


def test_alert_send_keys(browser):
    dialog = tab_of(browser).open_dialog("Your name?")
    assert browser.alert.send_keys("Ada") is True
    assert dialog.prompt_text == "Ada"
    assert dialog.accepted


def test_alert_timeout_is_not_an_error(browser):
    quick = ActionOptions(timeout=1)
    assert browser.alert.accept(quick) is False
    assert browser.alert.get_text(quick) is None


def test_dialog_raised_by_click_can_be_handled(browser):
    browser.navigate_to(SHOP_URL)
    tab = tab_of(browser)
    raised = []
    tab.document.body.append(el("button", {"id": "delete"}, text="Delete",
                                on_click=lambda node: raised.append(tab.open_dialog("Delete item?"))))

    browser.selector("#delete").click()

    assert browser.alert.get_text() == "Delete item?"
    assert browser.alert.accept() is True
    assert raised[0].accepted


def test_dialog_stays_with_its_tab(browser):
    dialog = tab_of(browser).open_dialog("Stay on this page?")
    assert browser.alert.get_text() == "Stay on this page?"

    browser.open_tab()
    assert browser.alert.accept(ActionOptions(timeout=1)) is False
    assert not dialog.accepted

    browser.switch_to_tab(0)
    assert browser.alert.accept() is True
    assert dialog.accepted
