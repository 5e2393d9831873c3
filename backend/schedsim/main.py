from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schedsim.api.routes_sim import router as sim_router
from schedsim.api.ws import router as ws_router

app = FastAPI(title="CPU Scheduling Simulator API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sim_router)
app.include_router(ws_router)


@app.get("/")
def root():
    return {"ok": True, "hint": "Use /health, /docs, /sim/state or POST /sim/simulate"}
