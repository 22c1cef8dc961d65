"""接口请求体规则集测试

测试内容：
1. create_task 的日期、重复规则、步骤、listId 校验
2. 禁止额外字段的规则
3. require_valid 抛出 ValidationError
"""

import pytest
from mydo.core.exceptions import ValidationError
from mydo.core.schemas import SCHEMAS, check_payload, require_valid

LIST_ID = "0123456789abcdef01234567"


class TestCreateTaskSchema:
    """create_task 规则"""

    def test_title_only(self):
        assert check_payload({"title": "Buy milk"}, "create_task").ok

    def test_missing_title(self):
        assert not check_payload({"important": True}, "create_task").ok

    def test_full_payload(self):
        payload = {
            "title": "Water plants",
            "dueDate": "2024-05-01",
            "repeat": {
                "amount": 2,
                "unit": "WEEK",
                "dueEvery": {"amount": 1, "unit": "DAY"},
            },
            "important": True,
            "myDay": False,
            "steps": [{"order": 0, "title": "fill can"}, {"order": 1.5, "title": "pour"}],
            "listId": LIST_ID,
        }
        assert check_payload(payload, "create_task").ok

    def test_bad_due_date(self):
        assert not check_payload({"title": "t", "dueDate": "tomorrow"}, "create_task").ok

    def test_fractional_repeat_amount(self):
        payload = {"title": "t", "repeat": {"amount": 3.3, "unit": "DAY"}}
        assert not check_payload(payload, "create_task").ok

    def test_unknown_repeat_unit(self):
        payload = {"title": "t", "repeat": {"amount": 3, "unit": "DECADES"}}
        assert not check_payload(payload, "create_task").ok

    def test_missing_repeat_unit(self):
        payload = {"title": "t", "repeat": {"amount": 3}}
        assert not check_payload(payload, "create_task").ok

    def test_nested_due_every_checked(self):
        payload = {
            "title": "t",
            "repeat": {
                "amount": 1,
                "unit": "WEEK",
                "dueEvery": {
                    "amount": 1,
                    "unit": "DAY",
                    "dueEvery": {"amount": 0, "unit": "MONTH"},
                },
            },
        }
        result = check_payload(payload, "create_task")
        assert [issue.path for issue in result.errors] == ["$.repeat.dueEvery.dueEvery.amount"]

    def test_nested_due_every_unit(self):
        payload = {
            "taskId": LIST_ID,
            "repeat": {
                "amount": 1,
                "unit": "WEEK",
                "dueEvery": {
                    "amount": 1,
                    "unit": "DAY",
                    "dueEvery": {"amount": 2, "unit": "FORTNIGHT"},
                },
            },
        }
        result = check_payload(payload, "update_task")
        assert [issue.path for issue in result.errors] == ["$.repeat.dueEvery.dueEvery.unit"]

    def test_step_extra_property(self):
        payload = {"title": "t", "steps": [{"order": 0, "title": "s", "note": "x"}]}
        assert not check_payload(payload, "create_task").ok

    def test_step_empty_title(self):
        payload = {"title": "t", "steps": [{"order": 0, "title": ""}]}
        assert not check_payload(payload, "create_task").ok

    def test_malformed_list_id(self):
        assert not check_payload({"title": "t", "listId": "grrr"}, "create_task").ok

    def test_extra_properties_allowed(self):
        assert check_payload({"title": "t", "color": "red"}, "create_task").ok


class TestOtherSchemas:
    """其余接口规则"""

    def test_update_task_rejects_done(self):
        """done 只能通过 mark 接口修改"""
        payload = {"taskId": LIST_ID, "done": True}
        assert not check_payload(payload, "update_task").ok

    def test_finish_task_requires_object_id(self):
        assert check_payload({"taskId": LIST_ID}, "finish_task").ok
        assert not check_payload({"taskId": "abc"}, "finish_task").ok
        assert not check_payload({}, "finish_task").ok

    def test_delete_task_accepts_any_non_empty_id(self):
        """格式错误的 id 留给存储层处理"""
        assert check_payload({"taskId": "abc"}, "delete_task").ok
        assert not check_payload({"taskId": ""}, "delete_task").ok
        assert not check_payload({"taskId": 12}, "delete_task").ok

    def test_create_tasklist_rejects_owner(self):
        assert not check_payload({"title": "Work", "owner": "grr"}, "create_tasklist").ok

    def test_delete_tasklist(self):
        assert check_payload({"tasklistId": LIST_ID}, "delete_tasklist").ok
        assert not check_payload({"tasklistId": "grrr"}, "delete_tasklist").ok

    def test_rename_tasklist_requires_both(self):
        assert not check_payload({"tasklistId": LIST_ID}, "rename_tasklist").ok
        assert check_payload({"tasklistId": LIST_ID, "newTitle": "New"}, "rename_tasklist").ok

    def test_list_tasklists_only_empty_object(self):
        assert check_payload({}, "list_tasklists").ok
        assert not check_payload({"x": 1}, "list_tasklists").ok

    def test_tasks_in_list_optional_id(self):
        assert check_payload({}, "tasks_in_list").ok
        assert check_payload({"tasklistId": LIST_ID}, "tasks_in_list").ok
        assert not check_payload({"tasklistId": "nope"}, "tasks_in_list").ok

    def test_all_schema_names(self):
        assert set(SCHEMAS) == {
            "create_task",
            "update_task",
            "finish_task",
            "delete_task",
            "create_tasklist",
            "delete_tasklist",
            "rename_tasklist",
            "list_tasklists",
            "tasks_in_list",
        }


class TestRequireValid:
    """require_valid 行为"""

    def test_returns_payload(self):
        payload = {"title": "t"}
        assert require_valid(payload, "create_task") is payload

    def test_raises_with_issues(self):
        with pytest.raises(ValidationError) as exc_info:
            require_valid({"title": 1}, "create_task")
        assert exc_info.value.message == "Invalid body"
        assert exc_info.value.issues

    def test_unknown_schema(self):
        with pytest.raises(KeyError):
            check_payload({}, "no_such_schema")
