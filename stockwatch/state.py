"""
指紋狀態儲存模組

保存上次通知時的快照指紋，供下次執行比較。提供三種儲存方式：
- EnvFingerprintStore: 從 UPDATE_HASH 環境變數讀取，新指紋輸出到 GITHUB_OUTPUT
- FileFingerprintStore: 本機 JSON 狀態檔
- GitHubVariableStore: GitHub Actions repository variable
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Mapping, Optional

import requests

logger = logging.getLogger(__name__)


# 預設的狀態檔案路徑
DEFAULT_STATE_FILE = "data/stock_state.json"

GITHUB_API_URL = "https://api.github.com"


class FingerprintStoreError(Exception):
    """讀取或寫入指紋狀態失敗"""
    pass


class FingerprintStore(ABC):
    """指紋儲存介面"""

    @abstractmethod
    def read(self) -> str:
        """返回上次保存的指紋，沒有記錄時返回空字串"""
        pass

    @abstractmethod
    def write(self, fingerprint: str) -> None:
        """保存新指紋"""
        pass


class EnvFingerprintStore(FingerprintStore):
    """
    從環境變數讀取指紋

    寫入時無法修改環境變數，改為把新指紋交給外部流程：
    有 GITHUB_OUTPUT 時附加 update_hash=<指紋> 一行作為步驟輸出，否則只記錄警告。
    """

    OUTPUT_NAME = "update_hash"

    def __init__(self, variable_name: str = "UPDATE_HASH", environ: Optional[Mapping[str, str]] = None):
        self.variable_name = variable_name
        self.environ = environ if environ is not None else os.environ

    def read(self) -> str:
        return (self.environ.get(self.variable_name) or "").strip()

    def write(self, fingerprint: str) -> None:
        output_file = self.environ.get("GITHUB_OUTPUT")
        if not output_file:
            logger.warning(
                "%s is read from the environment and cannot be updated here; new value: %s",
                self.variable_name,
                fingerprint,
            )
            return

        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{self.OUTPUT_NAME}={fingerprint}\n")
        logger.info("Exported new %s as step output %s", self.variable_name, self.OUTPUT_NAME)


class FileFingerprintStore(FingerprintStore):
    """本機 JSON 狀態檔，格式為 {"fingerprint": ..., "updated_at": ISO8601}"""

    def __init__(self, state_file: str = DEFAULT_STATE_FILE):
        self.state_file = state_file

    def _load_state(self) -> Dict:
        if not os.path.exists(self.state_file):
            return {}
        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.state_file, e)
            return {}
        return data if isinstance(data, dict) else {}

    def read(self) -> str:
        fingerprint = self._load_state().get("fingerprint")
        return fingerprint if isinstance(fingerprint, str) else ""

    def write(self, fingerprint: str) -> None:
        state = {
            "fingerprint": fingerprint,
            "updated_at": datetime.now().isoformat(),
        }
        # 確保目錄存在
        os.makedirs(os.path.dirname(self.state_file) or ".", exist_ok=True)

        tmp_path = f"{self.state_file}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.state_file)
        logger.info("Saved fingerprint to %s", self.state_file)


class GitHubVariableStore(FingerprintStore):
    """
    以 GitHub Actions repository variable 保存指紋

    需要具備 repository variables 寫入權限的 token。
    """

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        variable_name: str = "UPDATE_HASH",
        api_url: str = GITHUB_API_URL,
        timeout: float = 10,
    ):
        if not token or not owner or not repo:
            raise ValueError("GH_TOKEN and GITHUB_REPOSITORY (owner/repo) must be set")
        self.token = token
        self.owner = owner
        self.repo = repo
        self.variable_name = variable_name
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    @property
    def _variables_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/actions/variables"

    def read(self) -> str:
        url = f"{self._variables_url}/{self.variable_name}"
        try:
            response = requests.get(url, headers=self._headers, timeout=self.timeout)
            if response.status_code == 404:
                return ""
            response.raise_for_status()
            return (response.json().get("value") or "").strip()
        except requests.RequestException as e:
            raise FingerprintStoreError(f"Error reading {self.variable_name}: {e}") from e

    def write(self, fingerprint: str) -> None:
        data = {"name": self.variable_name, "value": fingerprint}
        try:
            response = requests.patch(
                f"{self._variables_url}/{self.variable_name}",
                headers=self._headers,
                json=data,
                timeout=self.timeout,
            )
            if response.status_code == 404:
                # 變數尚未建立
                response = requests.post(
                    self._variables_url,
                    headers=self._headers,
                    json=data,
                    timeout=self.timeout,
                )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Error updating hash: %s", e)
            raise FingerprintStoreError(f"Error updating {self.variable_name}: {e}") from e
        logger.info("Successfully updated hash")
