import logging
import threading

from cachetools import TTLCache

from app.analytics.engine import PredictionEngine
from app.analytics.patterns import runs
from app.config import Settings, settings as default_settings
from app.core.models import Round, parse_round
from app.history.store import HistoryStore
from app.upstream import UpstreamClient

log = logging.getLogger(__name__)


class PredictorService:
    def __init__(self, store: HistoryStore, engine: PredictionEngine, client: UpstreamClient,
                 cache: TTLCache, settings: Settings = default_settings):
        self.store = store
        self.engine = engine
        self.client = client
        self.cache = cache
        self.settings = settings
        # one fetch/ingest/predict cycle at a time
        self._lock = threading.Lock()
        # the list last written to the cache by this process
        self._mirrored = None

    def refresh_and_predict(self) -> dict:
        with self._lock:
            self._restore_from_cache()
            payload = self.client.fetch_latest()
            r = parse_round(payload)
            if r is not None:
                if self.store.add_round(r):
                    log.info("stored round %s (%s, %s)", r.session_id, r.outcome.value, r.total)
                self._mirrored = [x.to_dict() for x in self.store.get_all()]
                self.cache[self.settings.cache_key] = self._mirrored
            return self._build_response()

    def get_stats(self, window: int | None = None) -> dict:
        window = window or self.settings.stats_window
        with self._lock:
            recent = self.store.get_recent(window)
            length = len(self.store)
        freq = HistoryStore.frequency(recent)
        last = recent[-1] if recent else None
        outcomes = [x.outcome for x in recent]
        return {
            'window': window,
            'history_length': length,
            'high_count': freq.high_count,
            'low_count': freq.low_count,
            'high_ratio': freq.high_ratio,
            'low_ratio': freq.low_ratio,
            'last_outcome': last.outcome.value if last else None,
            'current_streak': HistoryStore.current_streak(recent, last.outcome) if last else 0,
            'runs': [
                {'start': s, 'end': e, 'outcome': o.value, 'length': n}
                for s, e, o, n in runs(outcomes, k=3)
            ],
        }

    def _restore_from_cache(self):
        cached = self.cache.get(self.settings.cache_key)
        if cached and cached is not self._mirrored:
            self.store.replace(Round.from_dict(d) for d in cached)

    def _build_response(self) -> dict:
        last = self.store.last()
        pred = self.engine.predict()
        out = {
            'id': self.settings.service_id,
            'phien_truoc': None,
            'ket_qua': None,
            'xuc_xac': [],
            'tong': None,
            'phien_sau': None,
            'du_doan': pred.label,
            'do_tin_cay': pred.formatted_confidence,
            'giai_thich': pred.rationale,
        }
        if last is None:
            return out
        out.update({
            'phien_truoc': last.session_id,
            'ket_qua': last.outcome.value,
            'xuc_xac': list(last.dice),
            'tong': last.total,
            'phien_sau': last.session_number + 1,
            'du_doan_vi': self.engine.position_hints(last.total),
        })
        return out


def build_service(cfg: Settings = default_settings) -> PredictorService:
    store = HistoryStore(max_length=cfg.max_history_length)
    client = UpstreamClient(cfg.upstream_url, timeout=cfg.upstream_timeout,
                            retries=cfg.retry_attempts, delay_ms=cfg.retry_delay_ms)
    return PredictorService(
        store=store,
        engine=PredictionEngine(store),
        client=client,
        cache=TTLCache(maxsize=1, ttl=cfg.cache_ttl),
        settings=cfg,
    )
