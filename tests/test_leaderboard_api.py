"""
排行榜接口测试
"""

from fastapi import status

from stepladder.exceptions import ConcurrentBuildConflict, DataSourceUnavailable


class TestLeaderboardRead:
    """排行榜读取"""

    def test_read_builds_missing_week(self, client, make_user, add_steps):
        a, b = make_user("Alice"), make_user("Bob")
        add_steps(a, 3, 700)
        add_steps(b, 3, 900)

        response = client.get("/leaderboard/3")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [row["display_name"] for row in data] == ["Bob", "Alice"]
        assert [row["rank"] for row in data] == [1, 2]
        assert data[0]["rank_history"] == [1]
        assert data[0]["trend"] == 0
        assert data[0]["display_tag"] == "bob"

    def test_read_empty_week(self, client):
        response = client.get("/leaderboard/5")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_week_must_be_positive(self, client):
        response = client.get("/leaderboard/0")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_week_beyond_season_not_found(self, client, service):
        """season 夹具的最大周为 10；超出范围的周不生成快照，也不登记构建锁"""
        for week in (11, 500):
            assert client.get(f"/leaderboard/{week}").status_code == status.HTTP_404_NOT_FOUND
            assert client.post(f"/leaderboard/{week}/rebuild").status_code == status.HTTP_404_NOT_FOUND
            assert client.get(f"/leaderboard/{week}/status").status_code == status.HTTP_404_NOT_FOUND

        assert client.get("/leaderboard/10").status_code == status.HTTP_200_OK
        assert set(service._week_locks) == {10}

    def test_current_week(self, client, make_user, add_steps):
        """season 夹具下当前周为第 2 周"""
        a = make_user("Alice")
        add_steps(a, 2, 4321)

        response = client.get("/leaderboard/current")

        assert response.status_code == status.HTTP_200_OK
        [row] = response.json()
        assert row["week_number"] == 2
        assert row["total_steps"] == 4321

    def test_status(self, client, make_user, add_steps):
        a = make_user("Alice")
        add_steps(a, 1, 100)

        assert client.get("/leaderboard/1/status").json()["state"] == "NOT_GENERATED"
        client.get("/leaderboard/1")
        assert client.get("/leaderboard/1/status").json() == {"week_number": 1, "state": "GENERATED"}


class TestLeaderboardRebuild:
    """排行榜重建"""

    def test_rebuild_picks_up_new_records(self, client, make_user, add_steps):
        a, b = make_user("Alice"), make_user("Bob")
        add_steps(a, 1, 500)
        assert len(client.get("/leaderboard/1").json()) == 1

        add_steps(b, 1, 800)
        # 已生成的快照不会自动更新
        assert len(client.get("/leaderboard/1").json()) == 1

        response = client.post("/leaderboard/1/rebuild")
        assert response.status_code == status.HTTP_200_OK
        assert [row["display_name"] for row in response.json()] == ["Bob", "Alice"]


class TestLeaderboardErrors:
    """构建失败会返回给调用方"""

    def test_data_source_unavailable(self, client, service, monkeypatch):
        def unavailable(week_number):
            raise DataSourceUnavailable("读取用户列表失败", {"week_number": week_number})

        monkeypatch.setattr(service, "get_or_build_week", unavailable)
        response = client.get("/leaderboard/2")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "DATA_SOURCE_UNAVAILABLE"
        assert body["error"]["details"] == {"week_number": 2}

    def test_concurrent_conflict(self, client, service, monkeypatch):
        def busy(week_number):
            raise ConcurrentBuildConflict(details={"week_number": week_number}, retry_after=2)

        monkeypatch.setattr(service, "build_week", busy)
        response = client.post("/leaderboard/4/rebuild")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.headers["Retry-After"] == "2"
        assert response.json()["error"]["code"] == "CONCURRENT_BUILD_CONFLICT"
