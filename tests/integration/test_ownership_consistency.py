"""任务/清单一致性端到端测试

测试内容：
1. 首次创建任务时自动创建 DefaultList，且只创建一次
2. 创建任务后对应清单成员 +1
3. 删除任务后清单中不再引用
4. 删除清单级联删除成员任务
5. 未命中的 listId 留下孤儿任务，可由清理命令回收
6. 不同 owner 之间互不可见
"""

from httpx import AsyncClient
from mydo.core.ids import new_object_id
from mydo.core.reconcile import sweep_orphans

ALICE = "0xaaaa000000000000000000000000000000000001"
BOB = "0xbbbb000000000000000000000000000000000002"


async def _post(client: AsyncClient, path: str, owner: str, **body):
    return await client.post(path, json={**body, "address": owner})


async def _send(client: AsyncClient, method: str, path: str, owner: str, **body):
    return await client.request(method, path, json={**body, "address": owner})


class TestDefaultList:
    """DefaultList 的创建与成员"""

    async def test_created_on_first_task(self, client: AsyncClient, stores):
        assert await stores.list_store.get_default_list(ALICE) is None

        resp = await _post(client, "/task", ALICE, title="first")
        assert resp.status_code == 200

        default_list = await stores.list_store.get_default_list(ALICE)
        assert default_list is not None
        assert default_list.title == "Tasks"
        assert default_list.tasks == [resp.json()["id"]]

    async def test_single_default_list_per_owner(self, client: AsyncClient, stores):
        for i in range(3):
            await _post(client, "/task", ALICE, title=f"task {i}")

        cursor = await stores.conn.execute(
            "SELECT COUNT(*) FROM default_lists WHERE owner = ?",
            (ALICE,),
        )
        row = await cursor.fetchone()
        assert row[0] == 1

        default_list = await stores.list_store.get_default_list(ALICE)
        assert len(default_list.tasks) == 3

    async def test_invalid_body_writes_nothing(self, client: AsyncClient, stores):
        resp = await _post(client, "/task", ALICE, title="t", dueDate="nope")
        assert resp.status_code == 400
        assert await stores.list_store.get_default_list(ALICE) is None
        assert await stores.task_store.list_task_keys(ALICE) == []

    async def test_blank_title_writes_nothing(self, client: AsyncClient, stores):
        """空白标题通过请求体规则，但在任何写入前被模型拒绝"""
        resp = await _post(client, "/task", ALICE, title="   ")
        assert resp.status_code == 400
        assert await stores.list_store.get_default_list(ALICE) is None
        assert await stores.task_store.list_task_keys(ALICE) == []

    async def test_blank_step_title_writes_nothing(self, client: AsyncClient, stores):
        resp = await _post(client, "/task", ALICE, title="t", steps=[{"order": 0, "title": " "}])
        assert resp.status_code == 400
        assert await stores.list_store.get_default_list(ALICE) is None

    async def test_nested_due_every_writes_nothing(self, client: AsyncClient, stores):
        repeat = {
            "amount": 1,
            "unit": "WEEK",
            "dueEvery": {"amount": 1, "unit": "DAY", "dueEvery": {"amount": 0, "unit": "DAY"}},
        }
        resp = await _post(client, "/task", ALICE, title="t", repeat=repeat)
        assert resp.status_code == 400
        assert await stores.list_store.get_default_list(ALICE) is None


class TestTasklistMembership:
    """Tasklist 成员"""

    async def test_membership_grows(self, client: AsyncClient, stores):
        resp = await _post(client, "/tasklist", ALICE, title="Work")
        list_id = resp.json()["id"]

        ids = []
        for i in range(3):
            resp = await _post(client, "/task", ALICE, title=f"w{i}", listId=list_id)
            ids.append(resp.json()["id"])

        tasklist = await stores.list_store.get_tasklist(list_id, ALICE)
        assert tasklist.tasks == ids
        # 指定清单时不会创建 DefaultList
        assert await stores.list_store.get_default_list(ALICE) is None

    async def test_delete_removes_reference(self, client: AsyncClient, stores):
        resp = await _post(client, "/tasklist", ALICE, title="Work")
        list_id = resp.json()["id"]
        resp = await _post(client, "/task", ALICE, title="w", listId=list_id)
        task_id = resp.json()["id"]

        resp = await _send(client, "DELETE", "/task", ALICE, taskId=task_id, listId=list_id)
        assert resp.status_code == 204

        tasklist = await stores.list_store.get_tasklist(list_id, ALICE)
        assert task_id not in tasklist.tasks
        assert await stores.task_store.get_task(task_id, ALICE) is None

    async def test_cascade_delete(self, client: AsyncClient, stores):
        resp = await _post(client, "/tasklist", ALICE, title="Work")
        list_id = resp.json()["id"]
        ids = []
        for i in range(2):
            resp = await _post(client, "/task", ALICE, title=f"w{i}", listId=list_id)
            ids.append(resp.json()["id"])

        resp = await _send(client, "DELETE", "/tasklist/remove", ALICE, tasklistId=list_id)
        assert resp.status_code == 200

        assert await stores.list_store.get_tasklist(list_id, ALICE) is None
        for task_id in ids:
            assert await stores.task_store.get_task(task_id, ALICE) is None

    async def test_cascade_skips_missing_members(self, client: AsyncClient, stores):
        """成员中已不存在的任务（悬挂引用）被跳过"""
        resp = await _post(client, "/tasklist", ALICE, title="Work")
        list_id = resp.json()["id"]
        await stores.list_store.add_task_to_tasklist(list_id, ALICE, new_object_id())
        await stores.conn.commit()

        resp = await _send(client, "DELETE", "/tasklist/remove", ALICE, tasklistId=list_id)
        assert resp.status_code == 200
        assert await stores.list_store.get_tasklist(list_id, ALICE) is None

    async def test_dangling_reference_skipped_on_read(self, client: AsyncClient, stores):
        resp = await _post(client, "/tasklist", ALICE, title="Work")
        list_id = resp.json()["id"]
        resp = await _post(client, "/task", ALICE, title="real", listId=list_id)
        await stores.list_store.add_task_to_tasklist(list_id, ALICE, new_object_id())
        await stores.conn.commit()

        resp = await client.request(
            "GET",
            f"/tasklist/tasksInList?tasklistId={list_id}",
            json={"address": ALICE},
        )
        assert resp.status_code == 200
        assert [t["title"] for t in resp.json()] == ["real"]


class TestOrphans:
    """未命中的 listId"""

    async def test_unknown_list_id_leaves_orphan(self, client: AsyncClient, stores):
        resp = await _post(client, "/task", ALICE, title="lost", listId=new_object_id())
        assert resp.status_code == 200
        task_id = resp.json()["id"]

        assert await stores.task_store.get_task(task_id, ALICE) is not None
        assert task_id not in await stores.list_store.referenced_task_ids(ALICE)

        swept = await sweep_orphans(stores.conn, stores.task_store, stores.list_store)
        assert swept == [task_id]
        assert await stores.task_store.get_task(task_id, ALICE) is None

    async def test_other_owners_list_is_not_used(self, client: AsyncClient, stores):
        resp = await _post(client, "/tasklist", BOB, title="Bob's")
        bob_list = resp.json()["id"]

        resp = await _post(client, "/task", ALICE, title="sneaky", listId=bob_list)
        assert resp.status_code == 200

        tasklist = await stores.list_store.get_tasklist(bob_list, BOB)
        assert tasklist.tasks == []


class TestOwnerIsolation:
    """不同 owner 之间互不可见"""

    async def test_mark_other_owners_task(self, client: AsyncClient):
        resp = await _post(client, "/task", ALICE, title="alice")
        task_id = resp.json()["id"]

        resp = await _send(client, "PUT", "/task/mark", BOB, taskId=task_id)
        assert resp.status_code == 404

    async def test_delete_other_owners_task(self, client: AsyncClient, stores):
        resp = await _post(client, "/task", ALICE, title="alice")
        task_id = resp.json()["id"]

        resp = await _send(client, "DELETE", "/task", BOB, taskId=task_id)
        assert resp.status_code == 404
        assert await stores.task_store.get_task(task_id, ALICE) is not None

    async def test_rename_other_owners_list(self, client: AsyncClient):
        resp = await _post(client, "/tasklist", ALICE, title="Work")
        list_id = resp.json()["id"]

        resp = await _send(
            client, "PUT", "/tasklist/title", BOB, tasklistId=list_id, newTitle="Mine"
        )
        assert resp.status_code == 404

    async def test_list_titles_scoped(self, client: AsyncClient):
        await _post(client, "/tasklist", ALICE, title="Alice list")
        await _post(client, "/tasklist", BOB, title="Bob list")

        resp = await _send(client, "GET", "/tasklist/allTasklists", BOB)
        assert [t["title"] for t in resp.json()] == ["Bob list"]


class TestToggleIdempotency:
    """连续两次标记恢复原状"""

    async def test_double_toggle(self, client: AsyncClient, stores):
        resp = await _post(client, "/task", ALICE, title="t", important=True)
        task_id = resp.json()["id"]

        first = await _send(client, "PUT", "/task/mark", ALICE, taskId=task_id)
        second = await _send(client, "PUT", "/task/mark", ALICE, taskId=task_id)
        assert first.json()["done"] is True
        assert second.json()["done"] is False

        task = await stores.task_store.get_task(task_id, ALICE)
        assert task.done is False
        assert task.important is True
        assert task.title == "t"
